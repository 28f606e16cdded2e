"""Medical record repositories - records, lab results and doctor-patient links"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.medical_record import DoctorPatient, LabResult, MedicalRecord


class MedicalRecordRepository:
    """Repository for medical records and doctor-patient links"""

    @staticmethod
    def get(db: Session, record_id: int) -> Optional[MedicalRecord]:
        return db.get(MedicalRecord, record_id)

    @staticmethod
    def list_for_patient(db: Session, patient_id: int) -> List[MedicalRecord]:
        return (
            db.query(MedicalRecord)
            .filter(MedicalRecord.patient_id == patient_id)
            .order_by(MedicalRecord.created_at.desc(), MedicalRecord.id.desc())
            .all()
        )

    @staticmethod
    def list_for_doctor(db: Session, doctor_id: int) -> List[MedicalRecord]:
        return (
            db.query(MedicalRecord)
            .filter(MedicalRecord.doctor_id == doctor_id)
            .order_by(MedicalRecord.created_at.desc(), MedicalRecord.id.desc())
            .all()
        )

    @staticmethod
    def add(db: Session, **record_data) -> MedicalRecord:
        record = MedicalRecord(**record_data)
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def update(db: Session, record: MedicalRecord, **updates) -> MedicalRecord:
        for key, value in updates.items():
            if hasattr(record, key):
                setattr(record, key, value)
        db.flush()
        return record

    # Doctor-patient links
    @staticmethod
    def link_doctor_patient(
        db: Session, doctor_id: int, patient_id: int,
        appointment_id: Optional[int] = None
    ) -> DoctorPatient:
        link = DoctorPatient(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_id=appointment_id,
        )
        db.add(link)
        db.flush()
        return link

    @staticmethod
    def is_linked(db: Session, doctor_id: int, patient_id: int) -> bool:
        return (
            db.query(DoctorPatient.id)
            .filter(DoctorPatient.doctor_id == doctor_id, DoctorPatient.patient_id == patient_id)
            .first()
            is not None
        )

    @staticmethod
    def patient_ids_for_doctor(db: Session, doctor_id: int) -> List[int]:
        rows = (
            db.query(DoctorPatient.patient_id)
            .filter(DoctorPatient.doctor_id == doctor_id)
            .distinct()
            .all()
        )
        return [row[0] for row in rows]


class LabResultRepository:
    """Repository for lab results"""

    @staticmethod
    def get(db: Session, result_id: int) -> Optional[LabResult]:
        return db.get(LabResult, result_id)

    @staticmethod
    def list_for_record(db: Session, medical_record_id: int) -> List[LabResult]:
        return (
            db.query(LabResult)
            .filter(LabResult.medical_record_id == medical_record_id)
            .order_by(LabResult.created_at.desc(), LabResult.id.desc())
            .all()
        )

    @staticmethod
    def add(db: Session, **result_data) -> LabResult:
        result = LabResult(**result_data)
        db.add(result)
        db.flush()
        return result
