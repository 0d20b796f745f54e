from openref.core.version import OPENREF_VERSION

USER_AGENT = f"openref/{OPENREF_VERSION}"
DEFAULT_RESPONSE_TIMEOUT = 10
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
