import logging

from equiring.bootstrap.config.loader import get_cli_args
from equiring.bootstrap.deps import get_config, get_executor, get_planner, get_renderer
from equiring.core.helpers.utils import setup_logging
from equiring.core.models.errors import BalanceError


def main() -> int:
    cli = get_cli_args()
    setup_logging(cli.log_level)
    logger = logging.getLogger("equiring.boot")

    config = get_config()
    planner = get_planner()
    renderer = get_renderer()

    try:
        plan = planner.plan(
            dry_run=config.balance.dry_run,
            force=config.balance.force
        )
        results = planner.apply(plan, get_executor())
    except (BalanceError, ValueError, FileNotFoundError) as ex:
        logger.error(f"Balancing aborted: {ex}")
        return 1

    report = plan.to_dict()
    report["results"] = [r.to_dict() for r in results]
    print(renderer.render(report))

    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
