"""
Doctor console API Routes
Appointments, prescriptions, reports, patients and profile tabs
"""
from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError
from datetime import date
from clinic_portal.extensions import db
from clinic_portal.models import (
    Appointment,
    Prescription,
    MedicalReport,
    BillingRecord,
    Profile,
    APPOINTMENT_STATUSES,
)
from clinic_portal.services import storage_service
from clinic_portal.services.dashboard_service import (
    count_todays_appointments,
    count_upcoming_appointments,
    total_revenue,
    pending_amount,
)
from clinic_portal.utils.decorators import require_role, require_doctor_profile
from clinic_portal.utils.audit import log_audit
from clinic_portal.utils.parsing import parse_date, parse_amount, parse_choice, missing_fields
import logging

logger = logging.getLogger(__name__)

doctor_bp = Blueprint("doctor", __name__, url_prefix="/api/doctor")


def _own_appointment(appointment_id):
    """Appointment of the current doctor or None"""
    return Appointment.query.filter_by(id=appointment_id, doctor_id=g.doctor.id).first()


def _add_billing(patient_id, service_type, billing_data, **links):
    """
    Independent second insert after a prescription or report.
    A failure here leaves the first row in place.
    Returns (billing_record or None, error message or None).
    """
    try:
        amount = parse_amount(billing_data.get("amount"))
    except ValueError as e:
        return None, str(e)

    record = BillingRecord(
        patient_id=patient_id,
        doctor_id=g.doctor.id,
        service_type=service_type,
        amount=amount,
        description=billing_data.get("description"),
        status="pending",
        **links,
    )
    try:
        db.session.add(record)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Billing insert failed: {e}", exc_info=True)
        return None, f"Failed to create billing record: {str(e)}"

    log_audit(
        "billing",
        "create",
        entity_id=record.id,
        details={"patient_id": patient_id, "amount": str(amount), **links},
    )
    return record, None


@doctor_bp.route("/profile", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def get_profile():
    return jsonify({"success": True, "data": g.doctor.to_dict()}), 200


@doctor_bp.route("/overview", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def overview():
    """Counters for the console header"""
    doctor = g.doctor
    appointments = Appointment.query.filter_by(doctor_id=doctor.id).all()
    billing = BillingRecord.query.filter_by(doctor_id=doctor.id).all()
    today = date.today()

    return jsonify(
        {
            "success": True,
            "data": {
                "doctor": doctor.to_dict(),
                "todays_appointments": count_todays_appointments(appointments, today),
                "upcoming_appointments": count_upcoming_appointments(appointments, today),
                "total_appointments": len(appointments),
                "prescriptions": Prescription.query.filter_by(doctor_id=doctor.id).count(),
                "reports": MedicalReport.query.filter_by(doctor_id=doctor.id).count(),
                "total_revenue": float(total_revenue(billing)),
                "pending_amount": float(pending_amount(billing)),
            },
        }
    ), 200


# ── Appointments tab ──────────────────────────────────────────────────────────


@doctor_bp.route("/appointments", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def list_appointments():
    """
    Appointments of the current doctor with patient and service.
    Query params:
        status: scheduled | confirmed | completed | cancelled (optional)
        date: YYYY-MM-DD (optional)
    """
    query = Appointment.query.filter_by(doctor_id=g.doctor.id)

    status = request.args.get("status", type=str)
    if status:
        try:
            query = query.filter(Appointment.status == parse_choice(status, APPOINTMENT_STATUSES))
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400

    try:
        filter_date = parse_date(request.args.get("date", type=str))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    if filter_date:
        query = query.filter(Appointment.appointment_date == filter_date)

    appointments = query.order_by(
        Appointment.appointment_date.asc(), Appointment.appointment_time.asc()
    ).all()

    return jsonify(
        {
            "success": True,
            "data": [a.to_dict(expand=("patient", "service")) for a in appointments],
        }
    ), 200


@doctor_bp.route("/appointments/<appointment_id>/status", methods=["PUT"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def update_appointment_status(appointment_id):
    """
    Update appointment status
    Status values: scheduled, confirmed, completed, cancelled
    """
    appointment = _own_appointment(appointment_id)
    if not appointment:
        return jsonify({"success": False, "error": "Appointment not found"}), 404

    data = request.get_json(silent=True)
    if not data:
        return jsonify({"success": False, "error": "Request body must be JSON"}), 400

    new_status = data.get("status")
    if not new_status:
        return jsonify({"success": False, "error": 'Field "status" is required'}), 400

    try:
        parse_choice(new_status, APPOINTMENT_STATUSES)
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    old_status = appointment.status
    try:
        appointment.status = new_status
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        return jsonify({"success": False, "error": f"Update failed: {str(e)}"}), 500

    log_audit(
        "appointment",
        "update",
        entity_id=appointment.id,
        details={"status": [old_status, new_status]},
    )

    return jsonify(
        {
            "success": True,
            "data": appointment.to_dict(expand=("patient", "service")),
            "message": f"Appointment status changed to {new_status}",
        }
    ), 200


# ── Prescriptions tab ─────────────────────────────────────────────────────────


@doctor_bp.route("/prescriptions", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def list_prescriptions():
    prescriptions = (
        Prescription.query.filter_by(doctor_id=g.doctor.id)
        .order_by(Prescription.created_at.desc())
        .all()
    )
    return jsonify(
        {
            "success": True,
            "data": [p.to_dict(expand=("patient", "appointment")) for p in prescriptions],
        }
    ), 200


@doctor_bp.route("/prescriptions", methods=["POST"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def create_prescription():
    """
    Create a prescription for one of the doctor's appointments

    Body:
        appointment_id: Appointment ID (required)
        medications: free text (required)
        instructions: free text (optional)
        follow_up_date: YYYY-MM-DD (optional)
        billing: {"amount": 25.0, "description": "..."} (optional, billed as a separate record)
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"success": False, "error": "Request body is required"}), 400

    if missing_fields(data, ["appointment_id", "medications"]):
        return jsonify(
            {"success": False, "error": "Please fill in all required fields."}
        ), 400

    try:
        follow_up_date = parse_date(data.get("follow_up_date"), "follow_up_date")
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    appointment = _own_appointment(data["appointment_id"])
    if not appointment:
        return jsonify({"success": False, "error": "Appointment not found"}), 404

    prescription = Prescription(
        appointment_id=appointment.id,
        patient_id=appointment.patient_id,
        doctor_id=g.doctor.id,
        medications=data["medications"],
        instructions=data.get("instructions") or None,
        follow_up_date=follow_up_date,
    )
    try:
        db.session.add(prescription)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating prescription: {e}", exc_info=True)
        return jsonify(
            {"success": False, "error": f"Failed to create prescription: {str(e)}"}
        ), 500

    log_audit(
        "prescription",
        "create",
        entity_id=prescription.id,
        details={"patient_id": prescription.patient_id, "appointment_id": appointment.id},
    )
    logger.info(
        f"Prescription {prescription.id} created for patient {prescription.patient_id} by doctor {g.doctor.id}"
    )

    body = {
        "success": True,
        "data": prescription.to_dict(expand=("patient", "appointment")),
        "message": "Prescription has been successfully added.",
    }

    billing_data = data.get("billing")
    if billing_data:
        record, error = _add_billing(
            prescription.patient_id,
            "prescription",
            billing_data,
            appointment_id=appointment.id,
            prescription_id=prescription.id,
        )
        body["billing"] = record.to_dict() if record else None
        if error:
            body["billing_error"] = error

    return jsonify(body), 201


# ── Reports tab ───────────────────────────────────────────────────────────────


@doctor_bp.route("/reports", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def list_reports():
    reports = (
        MedicalReport.query.filter_by(doctor_id=g.doctor.id)
        .order_by(MedicalReport.uploaded_at.desc())
        .all()
    )
    return jsonify({"success": True, "data": [r.to_dict() for r in reports]}), 200


@doctor_bp.route("/reports", methods=["POST"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def upload_report():
    """
    Upload a medical report file (multipart/form-data)

    Form fields:
        title: Report title (required)
        appointment_id: Appointment ID (required)
        file: pdf, jpg, jpeg, png, doc or docx (required)
        notes: optional
        amount, description: optional, billed as a separate record
    """
    form = request.form
    upload = request.files.get("file")

    if not form.get("title") or not form.get("appointment_id") or not upload or not upload.filename:
        return jsonify(
            {
                "success": False,
                "error": "Please fill in all required fields and select a file.",
            }
        ), 400

    if not storage_service.allowed_file(upload.filename):
        return jsonify(
            {
                "success": False,
                "error": "Unsupported file type. Allowed: pdf, jpg, jpeg, png, doc, docx",
            }
        ), 400

    appointment = _own_appointment(form["appointment_id"])
    if not appointment:
        return jsonify({"success": False, "error": "Appointment not found"}), 404

    # Step 1: store the file
    try:
        object_path = storage_service.upload(upload, folder="reports")
    except storage_service.StorageError as e:
        return jsonify({"success": False, "error": f"Upload failed: {str(e)}"}), 500

    # Step 2: save the metadata row pointing at it
    report = MedicalReport(
        patient_id=appointment.patient_id,
        doctor_id=g.doctor.id,
        appointment_id=appointment.id,
        title=form["title"],
        notes=form.get("notes") or None,
        file_name=upload.filename,
        file_type=upload.mimetype,
        file_url=storage_service.public_url(object_path),
    )
    try:
        db.session.add(report)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error saving report {object_path}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Upload failed: {str(e)}"}), 500

    log_audit(
        "report",
        "create",
        entity_id=report.id,
        details={"patient_id": report.patient_id, "file": object_path},
    )

    body = {
        "success": True,
        "data": report.to_dict(),
        "message": "Medical report has been successfully uploaded.",
    }

    if form.get("amount"):
        record, error = _add_billing(
            report.patient_id,
            "report",
            {"amount": form.get("amount"), "description": form.get("description")},
            appointment_id=appointment.id,
            report_id=report.id,
        )
        body["billing"] = record.to_dict() if record else None
        if error:
            body["billing_error"] = error

    return jsonify(body), 201


# ── Patients ──────────────────────────────────────────────────────────────────


@doctor_bp.route("/patients", methods=["GET"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def list_patients():
    """Patients who have at least one appointment with this doctor"""
    patients = (
        Profile.query.join(Appointment, Appointment.patient_id == Profile.id)
        .filter(Appointment.doctor_id == g.doctor.id)
        .distinct()
        .order_by(Profile.full_name.asc())
        .all()
    )
    return jsonify({"success": True, "data": [p.to_dict() for p in patients]}), 200


@doctor_bp.route("/patients/<patient_id>", methods=["DELETE"])
@jwt_required()
@require_role("doctor")
@require_doctor_profile
def delete_patient(patient_id):
    """
    Remove a patient: hard delete of the profile, its account and every
    appointment, prescription, report and billing row referencing it.
    """
    profile = db.session.get(Profile, patient_id)
    if not profile:
        return jsonify({"success": False, "error": f"Patient with ID {patient_id} not found"}), 404

    info = {"full_name": profile.full_name, "user_id": profile.user_id}
    try:
        if profile.user:
            db.session.delete(profile.user)  # cascades to the profile
        else:
            db.session.delete(profile)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error deleting patient {patient_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Failed to delete patient: {str(e)}"}), 500

    log_audit("patient", "delete", entity_id=patient_id, details=info)

    return jsonify(
        {
            "success": True,
            "message": f"Patient {patient_id} deleted successfully",
            "data": {"id": patient_id, **info},
        }
    ), 200
