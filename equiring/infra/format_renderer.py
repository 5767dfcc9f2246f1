import json

import yaml

from equiring.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, data: dict) -> str:
        return json.dumps(data, indent=2, sort_keys=False)


class YamlRenderer(Renderer):
    def render(self, data: dict) -> str:
        return yaml.safe_dump(data, sort_keys=False)


class TextRenderer(Renderer):
    """
    Operator-facing report: one line per host, in plan order, followed by
    a summary of what happened.
    """
    def render(self, data: dict) -> str:
        lines = []
        for op in data.get("operations", []):
            if op["action"] == "stay":
                lines.append(f"{op['host']}: Stays on token {op['old_token']}")
            else:
                lines.append(
                    f"{op['host']}: Moving from token {op['old_token']} "
                    f"to token {op['new_token']}"
                )

        lines.extend(self._summary(data))
        return "\n".join(lines)

    @staticmethod
    def _summary(data: dict) -> list[str]:
        if data.get("balanced"):
            return ["The cluster is balanced."]

        results = data.get("results", [])
        failed = [r for r in results if not r["ok"]]

        if data.get("dry_run"):
            return [f"Dry run: {data['moves_needed']} node(s) would move."]

        if failed:
            lines = [f"{len(failed)} of {len(results)} move(s) failed:"]
            lines.extend(f"  {r['host']}: {r['error']}" for r in failed)
            return lines

        if results:
            return ["The cluster is now balanced!"]

        return []


RENDERERS: dict[str, type[Renderer]] = {
    "text": TextRenderer,
    "yaml": YamlRenderer,
    "json": JsonRenderer,
}
