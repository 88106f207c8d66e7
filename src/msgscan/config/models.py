"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (MSGSCAN__SECTION__KEY)
3. YAML file (msgscan.yaml in the working directory, or --config)
4. Built-in defaults (this file)

Environment Variable Format:
    MSGSCAN__<SECTION>__<KEY>=<VALUE>

Examples:
    MSGSCAN__LOGGING__LEVEL=DEBUG
    MSGSCAN__EXTRACTORS='[{"callees": ["t"], "arguments": {"text": 0}}]'

Example YAML::

    extractors:
      - callees: [t, i18n.t]
        arguments: {text: 0, text_plural: 1, context: 2, comments: 3}
        comments:
          props: {props: ["{", "}"]}
          fallback: true
    locations:
      - pattern: {kind: function_declaration, name: translate, capture: true}
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from msgscan.extraction.comments import CommentConfig
from msgscan.extraction.identifiers import DEFAULT_IDENTIFIER_KEYS
from msgscan.extraction.literals import ContentOptions
from msgscan.extraction.patterns import pattern_from_dict
from msgscan.extraction.roles import ArgumentRoleMap
from msgscan.extraction.walker import CallRule, LocationRule

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MSGSCAN__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG also reports every ignored translator call.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ArgumentsConfig(BaseModel):
    """Argument position of each role."""

    text: int = Field(default=0, ge=0, description="Position of the message text.")
    text_plural: int | None = Field(default=None, ge=0)
    context: int | None = Field(default=None, ge=0)
    comments: int | None = Field(default=None, ge=0)


class CommentsConfig(BaseModel):
    """Structured comment payloads."""

    comment_key: str = Field(
        default="comment",
        description="Top-level key rendered as a plain comment line.",
    )
    props: dict[str, tuple[str, str]] = Field(
        default_factory=dict,
        description="Prop keys mapped to the opening and closing brackets of their entries.",
    )
    throw_when_malformed: bool = Field(
        default=True,
        description="Fail on comment values that are neither strings nor objects.",
    )
    fallback: bool = Field(
        default=False,
        description="Let optional roles be skipped when their argument has the wrong type.",
    )


class ContentConfig(BaseModel):
    """Normalisation of extracted text."""

    trim_whitespace: bool = False
    preserve_indentation: bool = True
    replace_new_lines: str | None = None


class ExtractorConfig(BaseModel):
    """One translator call rule."""

    callees: list[str] = Field(
        min_length=1,
        description="Dotted callee names, e.g. t, i18n.gettext, this.t.",
    )
    arguments: ArgumentsConfig = ArgumentsConfig()
    comments: CommentsConfig | None = None
    content: ContentConfig = ContentConfig()
    identifier_keys: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IDENTIFIER_KEYS),
        description="Message fields the identifier is built from.",
    )

    def to_rule(self) -> CallRule:
        comments = None
        if self.comments is not None:
            comments = CommentConfig(
                comment_key=self.comments.comment_key,
                props=self.comments.props,
                throw_when_malformed=self.comments.throw_when_malformed,
                fallback=self.comments.fallback,
            )
        return CallRule(
            callee_names=tuple(self.callees),
            roles=ArgumentRoleMap(**self.arguments.model_dump()),
            comments=comments,
            content=ContentOptions(**self.content.model_dump()),
            identifier_keys=tuple(self.identifier_keys),
        )


class LocationConfig(BaseModel):
    """One definition pattern."""

    pattern: dict[str, Any] = Field(description="Pattern in mapping form, keyed by 'kind'.")
    identifier: str | None = None
    restrict_to_file: str | None = Field(
        default=None,
        description="Only match in this file (as passed on the command line).",
    )

    def to_rule(self) -> LocationRule:
        return LocationRule(
            pattern=pattern_from_dict(self.pattern),
            identifier=self.identifier,
            restrict_to_file=self.restrict_to_file,
        )


class MsgScanConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extractors: list[ExtractorConfig] = Field(default_factory=list)
    locations: list[LocationConfig] = Field(default_factory=list)

    def call_rules(self) -> list[CallRule]:
        return [extractor.to_rule() for extractor in self.extractors]

    def location_rules(self) -> list[LocationRule]:
        return [location.to_rule() for location in self.locations]
