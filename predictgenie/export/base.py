"""Export file container shared by the CSV and JSON exporters."""

from dataclasses import dataclass

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"


@dataclass(frozen=True)
class ExportFile:
    """A fully rendered file ready for download."""

    file_name: str
    media_type: str
    content: bytes
    row_count: int

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")
