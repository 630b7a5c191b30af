"""ECC runtime settings (Pydantic v2 Settings).

Holds the process baseline that every cascade bottoms out at, plus logging
flags, so that:

* The CLI never hard-codes default widths.
* Environment overrides work (``ECC_MAX_LINE_WIDTH``, etc.).
* Tests can build a baseline directly via ``Settings(max_line_width=100)``.

Usage
-----
::

    from ecc.core.resolver import EditorConfigContext
    from ecc.core.settings import get_settings

    ctx = EditorConfigContext(get_settings().baseline())
    opts = ctx.get_options("src/main/Foo.kt")
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ecc.core.models import MAX_INT, FormattingOptions


class Settings(BaseSettings):
    """All runtime configuration for ECC.

    *max_comment_width* follows *max_line_width* unless set explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="ECC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Baseline formatting options ─────────────────────────
    max_line_width: int = Field(default=72, ge=1, le=MAX_INT)
    max_comment_width: int | None = Field(default=None, ge=1, le=MAX_INT)
    hanging_indent: int = Field(default=4, ge=0, le=MAX_INT)
    tab_width: int = Field(default=8, ge=1, le=MAX_INT)
    collapse_single_line: bool = True

    # ── Logging ─────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool = True  # structured JSON by default

    @model_validator(mode="after")
    def _derive_comment_width(self) -> "Settings":
        """Fill in the comment width when it was not overridden."""
        if self.max_comment_width is None:
            self.max_comment_width = self.max_line_width
        return self

    def baseline(self) -> FormattingOptions:
        """Build the baseline options every cascade falls back to."""
        assert self.max_comment_width is not None  # guaranteed after validation
        return FormattingOptions(
            max_line_width=self.max_line_width,
            max_comment_width=self.max_comment_width,
            hanging_indent=self.hanging_indent,
            tab_width=self.tab_width,
            collapse_single_line=self.collapse_single_line,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance.

    In tests, construct ``Settings(...)`` directly instead.
    """
    return Settings()
