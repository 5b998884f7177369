import logging
import sys
from typing import Literal
from typing import Optional

import structlog
from tap import Tap

from delphixci.config import ConfigError
from delphixci.config import UserConfig
from delphixci.config import load_user_config
from delphixci.engine.bookmark_repository import SelfServiceBookmarkRepository
from delphixci.engine.container_repository import SelfServiceRepository
from delphixci.engine.engine import DelphixEngine
from delphixci.errors import DelphixEngineError
from delphixci.errors import EngineConnectionError
from delphixci.messages import INVALID_ENGINE_ENVIRONMENT

logging.basicConfig(
    format="%(asctime)-15s %(levelname)s %(message)s", level=logging.INFO
)

logger = structlog.stdlib.get_logger(__name__)


class Arguments(Tap):
    kind: Literal["engines", "bookmarks", "containers"] = "engines"  # What to list
    # fmt: off
    # pylint: disable=consider-alternative-union-syntax
    engine: Optional[str] = None  # Engine to list bookmarks or containers of
    # fmt: on


def list_lines(config: UserConfig, args: Arguments) -> list[str]:
    if args.kind == "engines":
        return [f"{e.name}\t{e.address}" for e in config.engines]

    engine_config = config.engine(args.engine) if args.engine is not None else None
    if engine_config is None:
        raise DelphixEngineError(INVALID_ENGINE_ENVIRONMENT)
    engine = DelphixEngine.from_config(engine_config)
    engine.login()
    if args.kind == "bookmarks":
        return [
            f"{b.reference}\t{b.name}\t{b.container or ''}"
            for b in SelfServiceBookmarkRepository(engine).list_bookmarks().values()
        ]
    return [
        f"{c.reference}\t{c.name}\t{c.active_branch or ''}"
        for c in SelfServiceRepository(engine).list_containers().values()
    ]


def run(args: Arguments) -> int:
    try:
        config = load_user_config()
        for line in list_lines(config, args):
            print(line)
    except ConfigError as e:
        logger.error(e.message)
        return 1
    except (DelphixEngineError, EngineConnectionError) as e:
        logger.error(e.message)
        return 1
    return 0


def main() -> None:
    sys.exit(run(Arguments(underscores_to_dashes=True).parse_args()))


if __name__ == "__main__":
    main()
