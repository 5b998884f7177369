import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from tap import Tap

from delphixci.config import ConfigError
from delphixci.config import load_user_config
from delphixci.engine.engine import engine_resolver
from delphixci.steps.container_step import SelfServiceContainerStep
from delphixci.steps.operations import NULL_SELECTION
from delphixci.steps.step_result import exit_code
from delphixci.steps.step_result import write_env_file

logging.basicConfig(
    format="%(asctime)-15s %(levelname)s %(message)s", level=logging.INFO
)

logger = structlog.stdlib.get_logger(__name__)


class Arguments(Tap):
    engine: str  # Name of the engine, as configured in the configuration file
    container: str  # Container reference
    operation: str  # One of Refresh, Reset, Restore, Undo, Enable, Disable
    bookmark: str = NULL_SELECTION  # Bookmark to restore from (only needed for Restore)
    # fmt: off
    # pylint: disable=consider-alternative-union-syntax
    env_file: Optional[Path] = None  # Append published variables to this file
    # fmt: on
    fail_on_error: bool = False  # Exit with a non-zero code if the step didn't succeed


def run(args: Arguments) -> int:
    try:
        config = load_user_config()
    except ConfigError as e:
        logger.error(e.message)
        return 1

    result = SelfServiceContainerStep(
        delphix_engine=args.engine,
        delphix_container=args.container,
        delphix_operation=args.operation,
        delphix_bookmark=args.bookmark,
    ).perform(
        engine_resolver(config),
        logger.bind(step="container", engine=args.engine),
    )
    if args.env_file is not None:
        write_env_file(args.env_file, result.published)
    return exit_code(result, args.fail_on_error)


def main() -> None:
    sys.exit(run(Arguments(underscores_to_dashes=True).parse_args()))


if __name__ == "__main__":
    main()
