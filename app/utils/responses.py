from flask import jsonify


def ok(data=None, message="success", status=200):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, code=None, details=None):
    payload = {
        "status": "error",
        "message": message,
        "code": code or status
    }
    if details:
        payload.update(details)
    return jsonify(payload), status


def validation_error_response(errors):
    return jsonify({
        "status": "error",
        "message": "Validation failed",
        "code": "VALIDATION_ERROR",
        "errors": errors,
    }), 400


def internal_error_response():
    return error("An unexpected error occurred, please try again later", status=500)
