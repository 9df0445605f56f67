from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class ClinicSettings(Base):
    __tablename__ = 'clinic_settings'

    id = Column(Integer, primary_key=True)
    # {"0": {"open": false}, "1": {"open": true, "start": "08:00", ...}}, Sunday = "0"
    operating_hours = Column(Text, nullable=False, server_default=text("'{}'"))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class HolidayExceptions(Base):
    __tablename__ = 'holiday_exceptions'
    __table_args__ = (
        UniqueConstraint('date'),
    )

    date = Column(Text, nullable=False)  # YYYY-MM-DD
    name = Column(Text, nullable=False)
    is_open = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    start_time = Column(Text)  # HH:MM
    end_time = Column(Text)
    lunch_start = Column(Text)
    lunch_end = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class Professionals(Base):
    __tablename__ = 'professionals'

    name = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    bookings = relationship('Bookings', back_populates='professional')
    recurring_bookings = relationship('RecurringBookings', back_populates='professional')


class Services(Base):
    __tablename__ = 'services'

    name = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    bookings = relationship('Bookings', back_populates='service')
    recurring_bookings = relationship('RecurringBookings', back_populates='service')


class RecurringBookings(Base):
    __tablename__ = 'recurring_bookings'

    service_id = Column(ForeignKey('services.id'), nullable=False)
    professional_id = Column(ForeignKey('professionals.id', ondelete='CASCADE'), nullable=False)
    start_date = Column(Text, nullable=False)  # YYYY-MM-DD
    start_time = Column(Text, nullable=False)  # HH:MM
    duration = Column(Integer, nullable=False)
    rrule = Column(Text, nullable=False)  # FREQ=WEEKLY;BYDAY=MO;UNTIL=20240722
    status = Column(Text, nullable=False, server_default=text("'active'"))
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    service = relationship('Services', back_populates='recurring_bookings')
    professional = relationship('Professionals', back_populates='recurring_bookings')
    bookings = relationship('Bookings', back_populates='recurring_rule')


class Bookings(Base):
    __tablename__ = 'bookings'

    service_id = Column(ForeignKey('services.id'), nullable=False)
    professional_id = Column(ForeignKey('professionals.id', ondelete='CASCADE'), nullable=False)
    booking_date = Column(Text, nullable=False)  # YYYY-MM-DD
    booking_time = Column(Text, nullable=False)  # HH:MM
    duration = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'confirmed'"))
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer)
    notes = Column(Text)
    # Set together with status='canceled' to suppress one recurring instance
    recurring_rule_id = Column(ForeignKey('recurring_bookings.id', ondelete='CASCADE'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    service = relationship('Services', back_populates='bookings')
    professional = relationship('Professionals', back_populates='bookings')
    recurring_rule = relationship('RecurringBookings', back_populates='bookings')
