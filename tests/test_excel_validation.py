"""
Tests for Excel guest list import and seating export
"""

import pytest
import pandas as pd
import io
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.models import Event, Guest, Seat
from app.schemas.seating import TableCreate
from app.services.excel_service import ExcelService
from app.services.seating_service import SeatingService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def sample_event(db_session):
    """Create a sample event for testing"""
    event = Event(
        name="Test Wedding",
        date=datetime(2024, 6, 15),
        organizer_email="test@example.com",
        public_code="TEST123"
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event

def create_test_excel(data):
    """Helper function to create Excel bytes from data"""
    df = pd.DataFrame(data)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()

def test_validate_excel_structure_valid():
    """Test Excel structure validation with valid columns"""
    data = {
        'Name': ['John Doe'],
        'Side': ['bride'],
        'Group': ['family'],
        'Expected Guests': [2]
    }
    df = pd.DataFrame(data)

    valid, errors = ExcelService.validate_excel_structure(df)
    assert valid
    assert len(errors) == 0

def test_validate_excel_structure_missing_columns():
    """Test Excel structure validation without a name column"""
    data = {
        'Side': ['bride'],
        'Group': ['family']
    }
    df = pd.DataFrame(data)

    valid, errors = ExcelService.validate_excel_structure(df)
    assert not valid
    assert 'missing required columns' in errors[0].lower()

def test_validate_excel_structure_case_insensitive():
    """Test Excel structure validation with different cases"""
    df = pd.DataFrame({'  NAME ': ['John Doe'], 'group': ['family']})

    valid, errors = ExcelService.validate_excel_structure(df)
    assert valid
    assert len(errors) == 0

def test_map_columns():
    df = pd.DataFrame(columns=['Name', 'Side', 'Group', 'Expected Guests', 'RSVP Status', 'Guest Count', 'Phone'])

    assert ExcelService.map_columns(df) == {
        'name': 'Name',
        'side': 'Side',
        'group': 'Group',
        'expected': 'Expected Guests',
        'rsvp': 'RSVP Status',
        'count': 'Guest Count',
        'phone': 'Phone',
    }

def test_validate_data_constraints_ok():
    data = {
        'Name': ['John Doe', 'Jane Smith'],
        'Expected Guests': [2, 1],
        'RSVP Status': ['accepted', None],
        'Guest Count': [2, 0]
    }
    valid, errors = ExcelService.validate_data_constraints(pd.DataFrame(data))
    assert valid
    assert errors == []

def test_validate_data_constraints_non_numeric_party_size():
    data = {'Name': ['John Doe'], 'Expected Guests': ['many']}
    valid, errors = ExcelService.validate_data_constraints(pd.DataFrame(data))
    assert not valid
    assert 'numeric' in errors[0]

def test_validate_data_constraints_party_size_below_one():
    data = {'Name': ['John Doe'], 'Expected Guests': [0]}
    valid, errors = ExcelService.validate_data_constraints(pd.DataFrame(data))
    assert not valid
    assert 'at least 1' in errors[0]

def test_validate_data_constraints_invalid_rsvp():
    data = {'Name': ['John Doe', 'Jane Smith'], 'RSVP Status': ['ACCEPTED', 'MAYBE']}
    valid, errors = ExcelService.validate_data_constraints(pd.DataFrame(data))
    assert not valid
    assert "Row 3" in errors[0]
    assert "MAYBE" in errors[0]

def test_process_excel_upload_success(db_session, sample_event):
    """Test successful Excel upload processing"""
    data = {
        'Name': ['John Doe', 'Jane Smith', 'Bob Johnson', None],
        'Side': ['bride', 'groom', None, None],
        'Group': ['family', 'friends', 'work', None],
        'Expected Guests': [2, 1, 3, None],
        'RSVP Status': ['ACCEPTED', 'declined', None, None],
        'Guest Count': [2, 0, None, None]
    }
    excel_bytes = create_test_excel(data)

    success, errors, count = ExcelService.process_excel_upload(
        excel_bytes, sample_event.id, db_session
    )

    assert success
    assert len(errors) == 0
    assert count == 3

    # Verify database
    guests = {g.name: g for g in db_session.query(Guest).filter(Guest.event_id == sample_event.id)}
    assert set(guests) == {'John Doe', 'Jane Smith', 'Bob Johnson'}
    assert guests['John Doe'].rsvp.status == 'ACCEPTED'
    assert guests['John Doe'].rsvp.guest_count == 2
    assert guests['Jane Smith'].rsvp.status == 'DECLINED'
    assert guests['Bob Johnson'].side is None
    assert guests['Bob Johnson'].expected_guests == 3
    assert guests['Bob Johnson'].rsvp.status == 'PENDING'

def test_process_excel_upload_replace(db_session, sample_event):
    db_session.add(Guest(event_id=sample_event.id, name="Old Guest"))
    db_session.commit()
    excel_bytes = create_test_excel({'Name': ['New Guest']})

    success, _, count = ExcelService.process_excel_upload(
        excel_bytes, sample_event.id, db_session, replace=True
    )

    assert success
    assert count == 1
    names = [g.name for g in db_session.query(Guest).filter(Guest.event_id == sample_event.id)]
    assert names == ['New Guest']

def test_process_excel_upload_replace_frees_bound_seats(db_session, sample_event):
    """Replacing the guest list clears seats held by the removed guests"""
    ExcelService.process_excel_upload(create_test_excel({'Name': ['Alice']}), sample_event.id, db_session)
    alice = db_session.query(Guest).filter(Guest.name == "Alice").one()
    table = SeatingService.create_table(sample_event.id, TableCreate(name="Table 1", capacity=4), db_session)
    SeatingService.assign_guests_to_table(table.id, [alice.id], db_session)
    SeatingService.assign_seat(table.id, 1, alice.id, db_session)

    success, _, _ = ExcelService.process_excel_upload(
        create_test_excel({'Name': ['Stranger']}), sample_event.id, db_session, replace=True
    )

    assert success
    db_session.expire_all()
    seat = db_session.query(Seat).filter(Seat.table_id == table.id, Seat.seat_number == 1).one()
    assert seat.guest_id is None
    stranger = db_session.query(Guest).filter(Guest.name == "Stranger").one()
    assert stranger.table_assignment is None

def test_process_excel_upload_validation_failure(db_session, sample_event):
    """Test Excel upload with validation errors"""
    data = {
        'Name': ['John Doe', 'Jane Smith'],
        'Expected Guests': [1, -2]
    }
    excel_bytes = create_test_excel(data)

    success, errors, count = ExcelService.process_excel_upload(
        excel_bytes, sample_event.id, db_session
    )

    assert not success
    assert len(errors) > 0
    assert count == 0

    # Verify no data was inserted
    guests = db_session.query(Guest).filter(Guest.event_id == sample_event.id).all()
    assert len(guests) == 0

def test_create_template():
    """Test Excel template creation"""
    template_bytes = ExcelService.create_template()

    assert template_bytes is not None
    assert len(template_bytes) > 0

    # Verify template structure
    df = pd.read_excel(io.BytesIO(template_bytes))
    for col in ['Name', 'Side', 'Group', 'Expected Guests', 'RSVP Status', 'Guest Count']:
        assert col in df.columns

    valid, errors = ExcelService.validate_data_constraints(df)
    assert valid, errors

def test_export_seating(db_session, sample_event):
    """Test exporting the seating chart"""
    excel_bytes = create_test_excel({
        'Name': ['John Doe', 'Jane Smith'],
        'Expected Guests': [2, 1]
    })
    ExcelService.process_excel_upload(excel_bytes, sample_event.id, db_session)
    table = SeatingService.create_table(sample_event.id, TableCreate(name="Table 1"), db_session)
    john = db_session.query(Guest).filter(Guest.name == "John Doe").one()
    SeatingService.assign_guests_to_table(table.id, [john.id], db_session)

    exported = ExcelService.export_seating(sample_event.id, db_session)

    df = pd.read_excel(io.BytesIO(exported))
    assert list(df.columns) == ['Table', 'Name', 'Side', 'Group', 'RSVP Status', 'Seats']
    rows = {row['Name']: row for _, row in df.iterrows()}
    assert rows['John Doe']['Table'] == 'Table 1'
    assert rows['John Doe']['Seats'] == 2
    assert pd.isna(rows['Jane Smith']['Table'])
