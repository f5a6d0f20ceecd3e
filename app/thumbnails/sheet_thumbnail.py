import csv
import io
from pathlib import Path

from openpyxl import load_workbook
from PIL import Image, ImageDraw

from app.extraction.csv_extractor import read_csv_text
from app.thumbnails import canvas

PAGE_SIZE = (1200, 1600)
CELL_WIDTH = 180
CELL_HEIGHT = 40
ORIGIN = 20
MAX_ROWS = 35
MAX_COLUMNS = 6


def first_sheet_rows(path: Path, file_type: str) -> list[list[str]]:
    """Leading rows of the first sheet (or the CSV file) as strings."""
    if file_type == "csv":
        text, _ = read_csv_text(path)
        return list(csv.reader(io.StringIO(text)))[:MAX_ROWS]

    workbook = load_workbook(str(path), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [
            ["" if value is None else str(value) for value in row]
            for row in sheet.iter_rows(max_row=MAX_ROWS, values_only=True)
        ]
    finally:
        workbook.close()


def draw_sheet(path: Path, file_type: str) -> Image.Image:
    """Grid of the first rows and columns with a shaded header row."""
    rows = first_sheet_rows(path, file_type)
    row_count = min(len(rows), MAX_ROWS)
    column_count = min(len(rows[0]) if rows and rows[0] else MAX_COLUMNS, MAX_COLUMNS)

    image = canvas.blank_page(*PAGE_SIZE)
    draw = ImageDraw.Draw(image)
    header_font = canvas.font(14, bold=True)
    body_font = canvas.font(14)

    for column in range(column_count):
        left = ORIGIN + column * CELL_WIDTH
        draw.rectangle(
            (left + 1, ORIGIN + 1, left + CELL_WIDTH - 1, ORIGIN + CELL_HEIGHT - 1),
            fill="#f8f9fa",
        )

    grid_right = ORIGIN + column_count * CELL_WIDTH
    grid_bottom = ORIGIN + row_count * CELL_HEIGHT
    for column in range(column_count + 1):
        x = ORIGIN + column * CELL_WIDTH
        draw.line((x, ORIGIN, x, grid_bottom), fill="#e0e0e0", width=1)
    for row in range(row_count + 1):
        y = ORIGIN + row * CELL_HEIGHT
        draw.line((ORIGIN, y, grid_right, y), fill="#e0e0e0", width=1)

    for row_index, row in enumerate(rows[:row_count]):
        text_font = header_font if row_index == 0 else body_font
        fill = "#000000" if row_index == 0 else "#1a1a1a"
        for column in range(column_count):
            value = row[column] if column < len(row) else ""
            draw.text(
                (ORIGIN + column * CELL_WIDTH + 8, ORIGIN + row_index * CELL_HEIGHT + 12),
                canvas.truncate(value, 20, 17),
                font=text_font,
                fill=fill,
            )
    return image
