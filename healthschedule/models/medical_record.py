from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Text, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )

    date = Column(Date, nullable=False)
    diagnosis = Column(Text, nullable=False)
    prescription = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_medical_records_patient_created", "patient_id", "created_at"),
    )

    lab_results = relationship(
        "LabResult", back_populates="medical_record", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<MedicalRecord(id={self.id}, doctor_id={self.doctor_id}, patient_id={self.patient_id})>"

class LabResult(Base):
    __tablename__ = "lab_results"

    id = Column(Integer, primary_key=True, index=True)
    medical_record_id = Column(
        Integer, ForeignKey("medical_records.id"), nullable=False, index=True
    )

    test_name = Column(String(255), nullable=False)
    test_date = Column(Date, nullable=False)
    # Either a {name: value} mapping or free text
    results = Column(JSON, nullable=False)
    normal_range = Column(JSON, nullable=True)
    interpretation = Column(Text, nullable=True)
    performed_by = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    medical_record = relationship("MedicalRecord", back_populates="lab_results")

    def __repr__(self):
        return f"<LabResult(id={self.id}, medical_record_id={self.medical_record_id}, test_name='{self.test_name}')>"

class DoctorPatient(Base):
    __tablename__ = "doctor_patients"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    added_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<DoctorPatient(doctor_id={self.doctor_id}, patient_id={self.patient_id})>"
