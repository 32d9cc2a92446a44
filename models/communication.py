from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Enum, Table
from sqlalchemy import select, func
from sqlalchemy.orm import relationship, column_property
from datetime import datetime
from db.extensions import db
from models.communicationStatus import CommunicationStatus
from models.course import Course
from models.guardian import Guardian


# Guardians are owned elsewhere; rows here only link them to a communication
communication_guardian = Table(
    'communication_guardian',
    db.metadata,
    Column('communication_id', Integer, ForeignKey('communications.id'), primary_key=True),
    Column('guardian_id', Integer, ForeignKey('guardians.id'), primary_key=True),
)


class Communication(db.Model):
    __tablename__ = 'communications'

    id = Column(Integer, primary_key=True)
    course_id = Column(Integer, ForeignKey('courses.id'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    send_date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(CommunicationStatus, name='communication_status_enum'),
        nullable=False,
        default=CommunicationStatus.draft
    )
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    course = relationship('Course', back_populates='communications')
    guardians = relationship(
        'Guardian',
        secondary=communication_guardian,
        order_by='Guardian.id'
    )

    # Loaded only when a caller asks for counts
    guardians_count = column_property(
        select(func.count(communication_guardian.c.guardian_id))
        .where(communication_guardian.c.communication_id == id)
        .correlate_except(communication_guardian)
        .scalar_subquery(),
        deferred=True
    )

    @property
    def is_sent(self):
        return self.status == CommunicationStatus.sent

    def __repr__(self):
        return f"<Communication {self.id} {self.status.value if self.status else None}>"
