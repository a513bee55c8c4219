"""
Excel processing service for guest list import and seating export
"""

import io
from typing import List, Dict, Optional, Tuple
import pandas as pd
from sqlalchemy.orm import Session

from app.models import Guest, Rsvp, Seat
from app.services.guest_selection import RsvpStatus
from app.services.repositories import GuestRepo, TableRepo
from app.services.seating_service import seats_needed

class ExcelService:
    """Service for handling Excel operations"""

    REQUIRED_COLUMNS = ['name']
    OPTIONAL_COLUMNS = ['side', 'group', 'expected guests', 'rsvp status', 'guest count', 'phone']
    VALID_RSVP = {status.value for status in RsvpStatus}

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with the guest list columns"""
        df = pd.DataFrame(columns=[
            'Name', 'Side', 'Group', 'Expected Guests', 'RSVP Status', 'Guest Count', 'Phone'
        ])

        # Add sample data for guidance
        sample_data = [
            ['Sample Guest 1', 'bride', 'family', 2, 'ACCEPTED', 2, ''],
            ['Sample Guest 2', 'groom', 'friends', 1, 'PENDING', 0, ''],
            ['Sample Guest 3', 'both', 'work', 3, '', 0, ''],
        ]

        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')

        return buffer.getvalue()

    @staticmethod
    def map_columns(df: pd.DataFrame) -> Dict[str, str]:
        """Map normalized column names to the sheet's own headers"""
        column_mapping = {}
        for col in df.columns:
            col_lower = str(col).lower().strip()
            if col_lower == 'name':
                column_mapping['name'] = col
            elif 'side' in col_lower:
                column_mapping['side'] = col
            elif 'group' in col_lower:
                column_mapping['group'] = col
            elif 'expected' in col_lower:
                column_mapping['expected'] = col
            elif 'rsvp' in col_lower or 'status' in col_lower:
                column_mapping['rsvp'] = col
            elif 'count' in col_lower:
                column_mapping['count'] = col
            elif 'phone' in col_lower:
                column_mapping['phone'] = col
        return column_mapping

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate Excel file structure"""
        errors = []

        normalized_columns = [str(col).lower().strip() for col in df.columns]
        missing_columns = [col for col in ExcelService.REQUIRED_COLUMNS if col not in normalized_columns]

        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def validate_data_constraints(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate party sizes and RSVP values"""
        errors = []
        column_mapping = ExcelService.map_columns(df)

        for key, label in (('expected', 'Expected guests'), ('count', 'Guest count')):
            if key not in column_mapping:
                continue
            values = pd.to_numeric(df[column_mapping[key]], errors='coerce')
            raw = df[column_mapping[key]]
            if (values.isna() & raw.notna() & (raw.astype(str).str.strip() != '')).any():
                errors.append(f"{label} must be numeric")
            elif key == 'expected' and (values.dropna() < 1).any():
                errors.append("Expected guests must be at least 1")
            elif (values.dropna() < 0).any():
                errors.append(f"{label} cannot be negative")

        if 'rsvp' in column_mapping:
            for index, value in df[column_mapping['rsvp']].items():
                status = ExcelService._clean(value)
                if status and status.upper() not in ExcelService.VALID_RSVP:
                    errors.append(f"Row {index + 2}: invalid RSVP status '{value}'")

        return len(errors) == 0, errors

    @staticmethod
    def _clean(value) -> Optional[str]:
        if pd.isna(value):
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def _to_int(value, default: int) -> int:
        if pd.isna(value) or str(value).strip() == '':
            return default
        return int(float(value))

    @staticmethod
    def process_excel_upload(
        file_content: bytes,
        event_id: int,
        db: Session,
        replace: bool = False
    ) -> Tuple[bool, List[str], int]:
        """Import guests (and their RSVP) from an uploaded Excel file"""
        try:
            df = pd.read_excel(io.BytesIO(file_content))

            valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
            if not valid_structure:
                return False, structure_errors, 0

            valid_data, data_errors = ExcelService.validate_data_constraints(df)
            if not valid_data:
                return False, data_errors, 0

            column_mapping = ExcelService.map_columns(df)

            if replace:
                guests = db.query(Guest).filter(Guest.event_id == event_id).all()
                # seats reference guests without a cascade
                db.query(Seat).filter(Seat.guest_id.in_([guest.id for guest in guests])).update(
                    {Seat.guest_id: None}, synchronize_session=False
                )
                for guest in guests:
                    db.delete(guest)
                db.flush()

            processed_count = 0
            for _, row in df.iterrows():
                name = ExcelService._clean(row[column_mapping['name']])
                # Skip empty rows
                if not name:
                    continue

                def cell(key):
                    return row[column_mapping[key]] if key in column_mapping else None

                status = ExcelService._clean(cell('rsvp'))
                guest = Guest(
                    event_id=event_id,
                    name=name,
                    side=ExcelService._clean(cell('side')),
                    group_name=ExcelService._clean(cell('group')),
                    expected_guests=ExcelService._to_int(cell('expected'), 1),
                    phone_number=ExcelService._clean(cell('phone')),
                    rsvp=Rsvp(
                        status=status.upper() if status else RsvpStatus.PENDING.value,
                        guest_count=ExcelService._to_int(cell('count'), 0),
                    ),
                )
                db.add(guest)
                processed_count += 1

            db.commit()
            return True, [], processed_count

        except Exception as e:
            db.rollback()
            return False, [f"Error processing Excel file: {str(e)}"], 0

    @staticmethod
    def export_seating(event_id: int, db: Session) -> bytes:
        """Export the current seating chart to Excel"""
        table_names = {table.id: table.name for table in TableRepo.list_for_event(db, event_id)}

        data = []
        for guest in GuestRepo.list_for_event(db, event_id):
            assignment = guest.table_assignment
            data.append({
                'Table': table_names.get(assignment.table_id, '') if assignment else '',
                'Name': guest.name,
                'Side': guest.side or '',
                'Group': guest.group_name or '',
                'RSVP Status': guest.rsvp.status if guest.rsvp else RsvpStatus.PENDING.value,
                'Seats': seats_needed(guest),
            })

        df = pd.DataFrame(data, columns=['Table', 'Name', 'Side', 'Group', 'RSVP Status', 'Seats'])
        df = df.sort_values(['Table', 'Name'], kind='stable')

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Seating')

        return buffer.getvalue()
