import json
from functools import lru_cache

from pydantic import ValidationError

from equiring.bootstrap.config.loader import get_cli_args, get_overrides
from equiring.bootstrap.config.settings import EquiringConfig
from equiring.core.ports.render import Renderer
from equiring.core.service.planner import BalancePlanner
from equiring.infra.command_executor import CommandExecutor
from equiring.infra.format_renderer import RENDERERS
from equiring.infra.yaml_inventory import YamlInventory


@lru_cache
def get_planner() -> BalancePlanner:
    config = get_config()
    inventory = YamlInventory(
        path=config.inventory.file,
        resolve=config.inventory.resolve
    )
    return BalancePlanner(inventory)


@lru_cache
def get_executor() -> CommandExecutor:
    config = get_config()
    return CommandExecutor(
        command=config.executor.command,
        port=config.executor.port,
        timeout=config.executor.timeout
    )


@lru_cache
def get_renderer() -> Renderer:
    config = get_config()
    return RENDERERS[config.output.format]()


@lru_cache
def get_config() -> EquiringConfig:
    overrides = get_overrides(get_cli_args())
    try:
        return EquiringConfig(**overrides)  # type: ignore[arg-type]
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
