# Shared pytest fixtures
from __future__ import annotations

import tempfile
import zipfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

from xlsxrows.excel.columns import encode
from xlsxrows.logging.init import reset_logging

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/xl/workbook.xml" ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>
</Types>"""

WORKBOOK_1_ROWS: list[list[object]] = [
    ["id", "name", "number", "date", "complete"],
    [1, "foo", 65, 42736, "Yes"],
    [2, "bar", 12, 42737, "No"],
    [3, "baz", 7, 42738, "Yes"],
    [4, "qux", 100, 42739, "Yes"],
    [5, "quux", 0, 42740, "No"],
    [6, "corge", 3.5, 42741, "Yes"],
    [7, "grault", 18, 42742, "No"],
    [8, "garply", 21, 42743, "Yes"],
    [9, None, 44, 42716, "No"],
]


def _si(value: str | tuple[str, ...]) -> str:
    if isinstance(value, tuple):
        runs = "".join(f"<r><rPr><b/></rPr><t xml:space=\"preserve\">{escape(t)}</t></r>" for t in value)
        return f"<si>{runs}</si>"
    return f"<si><t xml:space=\"preserve\">{escape(value)}</t></si>"


def build_xlsx(
    path: Path,
    rows: list[list[object]],
    *,
    sheet_num: int = 1,
    include_shared_strings: bool = True,
) -> Path:
    """Write a minimal XLSX archive.

    Cell values: str / tuple[str, ...] -> shared string (tuple = rich-text runs),
    bool -> t="b", int/float -> stored number, None -> no cell.
    """
    shared: list[str | tuple[str, ...]] = []
    lookup: dict[str | tuple[str, ...], int] = {}
    row_xml: list[str] = []

    for r, values in enumerate(rows, start=1):
        cells: list[str] = []
        for c, value in enumerate(values):
            if value is None:
                continue
            ref = f"{encode(c).upper()}{r}"
            if isinstance(value, (str, tuple)):
                if value not in lookup:
                    lookup[value] = len(shared)
                    shared.append(value)
                cells.append(f'<c r="{ref}" t="s"><v>{lookup[value]}</v></c>')
            elif isinstance(value, bool):
                cells.append(f'<c r="{ref}" t="b"><v>{int(value)}</v></c>')
            else:
                cells.append(f'<c r="{ref}"><v>{value}</v></c>')
        row_xml.append(f'<row r="{r}">{"".join(cells)}</row>')

    sheet = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<worksheet xmlns="{MAIN_NS}"><sheetData>{"".join(row_xml)}</sheetData></worksheet>'
    )
    sst = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<sst xmlns="{MAIN_NS}" count="{len(shared)}" uniqueCount="{len(shared)}">'
        f'{"".join(_si(s) for s in shared)}</sst>'
    )

    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", CONTENT_TYPES)
        zf.writestr(f"xl/worksheets/sheet{sheet_num}.xml", sheet)
        if include_shared_strings:
            zf.writestr("xl/sharedStrings.xml", sst)
    return path


@dataclass
class FakeNode:
    """Synthetic XmlNode; no XML document involved."""
    tag: str
    value: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[FakeNode] = field(default_factory=list)

    def children_named(self, tag: str) -> list[FakeNode]:
        return [c for c in self.children if c.tag == tag]

    def attribute(self, name: str) -> str | None:
        return self.attrs.get(name)

    def text(self) -> str:
        return self.value


@pytest.fixture()
def fake_node() -> type[FakeNode]:
    return FakeNode


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        (p / "tmp").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, rows: list[list[object]], **kwargs) -> Path:
        return build_xlsx(temp_workdir / "data" / name, rows, **kwargs)
    return _make


@pytest.fixture()
def workbook_1(make_workbook) -> Path:
    return make_workbook("workbook_1.xlsx", WORKBOOK_1_ROWS)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """sheet: 1
has_header_row: true
row_numbers: false
tmp_dir: ./tmp
header_overrides:
  0: identifier
  e: done
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "xlsxrows.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
