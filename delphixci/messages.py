from typing import Final

INVALID_ENGINE_ENVIRONMENT: Final = (
    "Invalid Delphix Engine selection: choose an engine that is configured for this build server"
)
MISSING_DCT_CONFIGURATION: Final = "Delphix Global Configuration Missing"
WAIT_INTERRUPTED: Final = "Wait interrupted!"


def unable_to_connect(address: str) -> str:
    return f"Unable to connect to Delphix Engine: {address}"


def missing_credentials(credential_id: str) -> str:
    return f"Cannot find any credentials for {credential_id}"


def undefined_operation(what: str, operation: str) -> str:
    return f'Undefined {what} Operation "{operation}"'
