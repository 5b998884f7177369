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
from delphixci.steps.vdb_steps import ProvisionVdbStep

logging.basicConfig(
    format="%(asctime)-15s %(levelname)s %(message)s", level=logging.INFO
)

logger = structlog.stdlib.get_logger(__name__)


class Arguments(Tap):
    credential_id: str  # ID of the DCT API key in the configuration file (or DELPHIXCI_API_KEY_<ID>)
    provision_type: str = "Bookmark"  # Bookmark or Snapshot
    # fmt: off
    # pylint: disable=consider-alternative-union-syntax
    bookmark_id: Optional[str] = None  # Bookmark to provision from
    source_data_id: Optional[str] = None  # dSource or VDB to provision from (Snapshot)
    snapshot_id: Optional[str] = None  # Snapshot to provision from; latest if not given (Snapshot)
    engine_id: Optional[str] = None  # Engine to provision on (Snapshot)
    name: Optional[str] = None  # Name of the new VDB
    database_name: Optional[str] = None  # Database name inside the VDB
    environment_id: Optional[str] = None  # Target environment
    repository_id: Optional[str] = None  # Target repository
    target_group_id: Optional[str] = None  # Group the VDB is placed in
    env_file: Optional[Path] = None  # Append VDB_ID and JOB_ID to this file
    # fmt: on
    no_auto_select_repository: bool = False  # Don't let DCT pick the repository
    skip_polling: bool = False  # Don't wait for the provisioning job
    fail_on_error: bool = False  # Exit with a non-zero code if the step didn't succeed


def run(args: Arguments) -> int:
    try:
        config = load_user_config()
    except ConfigError as e:
        logger.error(e.message)
        return 1

    result = ProvisionVdbStep(
        credential_id=args.credential_id,
        provision_type=args.provision_type,
        bookmark_id=args.bookmark_id,
        source_data_id=args.source_data_id,
        snapshot_id=args.snapshot_id,
        engine_id=args.engine_id,
        name=args.name,
        database_name=args.database_name,
        environment_id=args.environment_id,
        repository_id=args.repository_id,
        target_group_id=args.target_group_id,
        auto_select_repository=not args.no_auto_select_repository,
        skip_polling=args.skip_polling,
    ).perform(config, logger.bind(step="vdb-provision"))
    if args.env_file is not None:
        write_env_file(args.env_file, result.published)
    return exit_code(result, args.fail_on_error)


def main() -> None:
    sys.exit(run(Arguments(underscores_to_dashes=True).parse_args()))


if __name__ == "__main__":
    main()
