from __future__ import annotations

import base64
import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import parse_scan_action, parse_shift_type, require_non_empty
from ..core.constants import DEFAULT_QR_PAYLOAD_TYPE
from ..core.exceptions import EmployeeNotFoundError, RecordNotFoundError, StoreError, ValidationError
from ..container import Container
from . import qr_reader
from .model import ScanRequest

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _fail(message: str, status_code: int):
        return jsonify({"success": False, "message": message}), status_code

    def _data_uri(upload) -> str:
        content = base64.b64encode(upload.read()).decode("ascii")
        return f"data:{upload.mimetype or 'image/jpeg'};base64,{content}"

    def _parse_timestamp(value):
        if not value:
            return None
        try:
            return parse_iso_datetime(str(value))
        except ValueError:
            raise ValidationError("Invalid timestamp") from None

    def _scan(*, identifier, shift_type, timestamp=None, scan_photo=None):
        try:
            scan = ScanRequest(
                identifier=require_non_empty(identifier, "Email or employee ID"),
                shift_type=parse_shift_type(shift_type),
                timestamp=_parse_timestamp(timestamp),
                scan_photo=scan_photo or None,
            )
            result = container.attendance_service.record_scan(scan)
            return jsonify(result.to_dict()), 200
        except ValidationError as e:
            return _fail(str(e), 400)
        except EmployeeNotFoundError as e:
            return _fail(str(e), 404)
        except StoreError:
            logger.exception("Attendance store failure, scan not recorded")
            return _fail("Failed to process attendance, please scan again", 500)
        except Exception:
            logger.exception("Unexpected error while processing scan")
            return _fail("Failed to process attendance", 500)

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        """Record a punch from a scanned badge (JSON body)."""
        data = request.get_json(silent=True) or {}
        return _scan(
            identifier=data.get("identifier") or data.get("email") or data.get("user_id") or data.get("userId"),
            shift_type=data.get("shift_type") or data.get("shiftType"),
            timestamp=data.get("timestamp"),
            scan_photo=data.get("scan_photo") or data.get("scanPhoto"),
        )

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    def api_attendance_scan_image():
        """Decode the badge QR from an uploaded image, then record the punch."""
        if "image" not in request.files:
            return _fail("Missing image file", 400)

        try:
            payload = qr_reader.decode_qr_image(request.files["image"].stream)
            identifier = qr_reader.parse_qr_payload(payload, expected_type=app.config.get("QR_PAYLOAD_TYPE", DEFAULT_QR_PAYLOAD_TYPE))
        except ValidationError as e:
            return _fail(str(e), 400)
        except OSError:
            return _fail("Unreadable image", 400)

        return _scan(
            identifier=identifier,
            shift_type=request.form.get("shift_type"),
            scan_photo=request.form.get("scan_photo"),
        )

    @app.route("/api/attendance/photo", methods=["POST"], endpoint="api_attendance_photo")
    def api_attendance_photo():
        """Attach the kiosk photo of a punch that was already recorded."""
        data = request.get_json(silent=True) or request.form
        try:
            raw_id = require_non_empty(data.get("record_id") or data.get("attendanceId"), "Record ID")
            try:
                record_id = int(raw_id)
            except ValueError:
                raise ValidationError("Invalid record ID") from None
            action = parse_scan_action(data.get("action"))
            photo = data.get("photo") or data.get("photoUrl")
            if not photo and "photo" in request.files:
                photo = _data_uri(request.files["photo"])
            record = container.attendance_service.attach_photo(record_id, action, photo)
            return jsonify({"success": True, "record": record.to_dict()}), 200
        except ValidationError as e:
            return _fail(str(e), 400)
        except RecordNotFoundError as e:
            return _fail(str(e), 404)
        except StoreError:
            logger.exception("Attendance store failure, photo not attached")
            return _fail("Failed to attach photo", 500)
        except Exception:
            logger.exception("Unexpected error while attaching photo")
            return _fail("Failed to attach photo", 500)

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    def api_attendance_status():
        """Next expected punch for an employee."""
        try:
            identifier = require_non_empty(request.args.get("identifier") or request.args.get("email"), "Email or employee ID")
            shift_type = parse_shift_type(request.args.get("shift_type"))
            status = container.attendance_service.get_status(identifier, shift_type)
            return jsonify(status), 200
        except ValidationError as e:
            return _fail(str(e), 400)
        except EmployeeNotFoundError as e:
            return _fail(str(e), 404)
        except Exception:
            logger.exception("Failed to check attendance status")
            return _fail("Failed to check attendance status", 500)
