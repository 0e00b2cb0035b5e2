"""Configuration dataclasses for encoding, output and chart previews."""

from dataclasses import dataclass, field
from typing import Optional

from constants import FORMATS, FORMAT_MSG


@dataclass(frozen=True)
class CodecConfig:
    """Options shared by the three payload encoders."""

    # None = single-line text output, an int pretty-prints the verbose form
    json_indent: Optional[int] = None
    ensure_ascii: bool = False

    # JSON has no spelling for NaN/Infinity; when False such values are an
    # EncodeFailureError in the text formats instead of emitting invalid JSON
    allow_non_finite: bool = False

    # Store text as msgpack str and raw bytes as msgpack bin
    msg_use_bin_type: bool = True

    def __post_init__(self) -> None:
        if self.json_indent is not None and self.json_indent < 0:
            raise ValueError(f"json_indent must be non-negative, got {self.json_indent}")


@dataclass(frozen=True)
class OutputConfig:
    """Options for writing payload files."""

    # Used when a path has no extension; the matching extension is appended
    default_format: str = FORMAT_MSG

    # Write to a sibling temp file and rename it into place
    atomic_write: bool = True

    def __post_init__(self) -> None:
        if self.default_format not in FORMATS:
            raise ValueError(
                f"Invalid default_format: {self.default_format}. Use one of {FORMATS}"
            )


@dataclass(frozen=True)
class PreviewConfig:
    """Options for PNG previews of Bin and Point branches."""

    dpi: int = 150
    bins_color: str = '#3498db'
    points_color: str = 'purple'
    point_size: float = 8.0
    max_panels: int = 12


@dataclass
class Config:
    """Master configuration combining all config sections."""

    codec: CodecConfig = field(default_factory=CodecConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)


DEFAULT_CONFIG = Config()
