import csv
import io
from typing import List, Optional
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment
from sqlalchemy.orm import Session
from database.models import Registration
from services.registration_service import get_filtered_registrations
from utils.timezone import format_registration_datetime, get_local_now

EXPORT_HEADERS = [
    "ID",
    "Full Name",
    "Email",
    "College Name",
    "Department",
    "Event Name",
    "Event Date",
    "Category",
    "Registration Date",
]

UTF8_BOM = "\ufeff"


def export_filename(extension: str = "csv") -> str:
    """Имя файла выгрузки с текущим временем"""
    return f"event_registrations_{get_local_now().strftime('%Y-%m-%d_%H%M%S')}.{extension}"


def registration_to_row(reg: Registration) -> list:
    """Строка выгрузки в фиксированном порядке колонок"""
    return [
        reg.id,
        reg.full_name,
        reg.email,
        reg.college_name,
        reg.department,
        reg.event.name,
        reg.event.event_date,
        reg.event.category,
        format_registration_datetime(reg.created_at)
    ]


def registrations_to_csv(registrations: List[Registration]) -> bytes:
    """CSV в UTF-8 с BOM, чтобы Excel правильно открыл кодировку"""
    output = io.StringIO()
    output.write(UTF8_BOM)

    writer = csv.writer(output)
    writer.writerow(EXPORT_HEADERS)
    for reg in registrations:
        writer.writerow(registration_to_row(reg))

    return output.getvalue().encode("utf-8")


def export_registrations_to_csv(
    db: Session,
    event_id: Optional[int] = None,
    event_date: Optional[str] = None
) -> bytes:
    """Экспорт регистраций в CSV с теми же фильтрами, что и в списке"""
    registrations = get_filtered_registrations(db, event_id=event_id, event_date=event_date)
    return registrations_to_csv(registrations)


def export_registrations_to_excel(
    db: Session,
    event_id: Optional[int] = None,
    event_date: Optional[str] = None
) -> bytes:
    """Экспорт регистраций в Excel"""
    registrations = get_filtered_registrations(db, event_id=event_id, event_date=event_date)

    wb = Workbook()
    ws = wb.active
    ws.title = "Registrations"

    ws.append(EXPORT_HEADERS)

    # Стиль для заголовков
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for reg in registrations:
        ws.append(registration_to_row(reg))

    # Автоматическая ширина столбцов
    for column in ws.columns:
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        column_letter = column[0].column_letter
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
