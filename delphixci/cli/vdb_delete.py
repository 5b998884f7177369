import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from tap import Tap

from delphixci.config import ConfigError
from delphixci.config import load_user_config
from delphixci.steps.step_result import exit_code
from delphixci.steps.step_result import write_env_file
from delphixci.steps.vdb_steps import DeleteVdbStep

logging.basicConfig(
    format="%(asctime)-15s %(levelname)s %(message)s", level=logging.INFO
)

logger = structlog.stdlib.get_logger(__name__)


class Arguments(Tap):
    credential_id: str  # ID of the DCT API key in the configuration file (or DELPHIXCI_API_KEY_<ID>)
    vdb_id: str  # VDB to delete
    force: bool = False  # Delete even if the engine can't clean up the target
    skip_polling: bool = False  # Don't wait for the delete job
    # fmt: off
    # pylint: disable=consider-alternative-union-syntax
    env_file: Optional[Path] = None  # Append JOB_ID to this file
    # fmt: on
    fail_on_error: bool = False  # Exit with a non-zero code if the step didn't succeed


def run(args: Arguments) -> int:
    try:
        config = load_user_config()
    except ConfigError as e:
        logger.error(e.message)
        return 1

    result = DeleteVdbStep(
        credential_id=args.credential_id,
        vdb_id=args.vdb_id,
        force=args.force,
        skip_polling=args.skip_polling,
    ).perform(config, logger.bind(step="vdb-delete", vdb=args.vdb_id))
    if args.env_file is not None:
        write_env_file(args.env_file, result.published)
    return exit_code(result, args.fail_on_error)


def main() -> None:
    sys.exit(run(Arguments(underscores_to_dashes=True).parse_args()))


if __name__ == "__main__":
    main()
