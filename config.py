import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel

ENV_PREFIX = "BASIC_"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    open_browser: bool = True
    log_level: str = "WARNING"
    # seconds; None or 0 waits forever
    input_timeout: Optional[float] = None
    step_timeout: Optional[float] = None
    run_timeout: Optional[float] = 10.0
    static_dir: str = "static"

    @classmethod
    def from_env(cls, environ=None):
        """Reads BASIC_<FIELD> variables, e.g. BASIC_PORT=9000."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)


@lru_cache
def get_settings():
    return Settings.from_env()
