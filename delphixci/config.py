import os
from pathlib import Path
from typing import Final
from typing import Optional

import structlog
import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError
from xdg import xdg_config_home

CONFIG_PATH_ENV_VAR: Final = "DELPHIXCI_CONFIG"
API_KEY_ENV_VAR_PREFIX: Final = "DELPHIXCI_API_KEY_"

logger = structlog.stdlib.get_logger(__name__)


# this is deliberately a function so that it neatly works with pyfakefs (and performance doesn't matter)
def user_config_path() -> Path:
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override)
    return xdg_config_home() / "delphixci" / "config.yml"


class ConfigError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EngineConfig(BaseModel):
    name: str
    address: str
    username: str
    password: str
    use_https: bool = True
    verify_ssl: bool = True


class DctConfig(BaseModel):
    url: str
    verify_ssl: bool = True
    api_keys: dict[str, str] = Field(default_factory=dict)


class UserConfig(BaseModel):
    engines: list[EngineConfig] = Field(default_factory=list)
    dct: Optional[DctConfig] = None

    def engine(self, name: str) -> None | EngineConfig:
        for e in self.engines:
            if e.name == name:
                return e
        return None

    def api_key(self, credential_id: str) -> None | str:
        if self.dct is not None and credential_id in self.dct.api_keys:
            return self.dct.api_keys[credential_id]
        return os.environ.get(api_key_env_var(credential_id))


def api_key_env_var(credential_id: str) -> str:
    return API_KEY_ENV_VAR_PREFIX + credential_id.upper().replace("-", "_")


def remove_user_config() -> None:
    user_config_path().unlink(missing_ok=True)


def load_user_config() -> UserConfig:
    path = user_config_path()
    if not path.exists():
        logger.info(f"no configuration found at {path}, using an empty one")
        return UserConfig()
    try:
        with path.open("r") as f:
            content = yaml.load(f, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"configuration file {path} isn't valid YAML: {e}") from e
    if content is None:
        return UserConfig()
    if not isinstance(content, dict):
        raise ConfigError(f"configuration file {path} doesn't contain a mapping")
    try:
        return UserConfig(**content)
    except ValidationError as e:
        raise ConfigError(f"configuration file {path} is invalid: {e}") from e


def write_user_config(uc: UserConfig) -> None:
    user_config_path().parent.mkdir(parents=True, exist_ok=True)
    with user_config_path().open("w") as f:
        f.write(yaml.dump(uc.model_dump(), Dumper=yaml.SafeDumper))
