# Overview: JSON response envelope shared by every endpoint: {success, data?, error?}.

from flask import jsonify


def ok(data=None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "error": message}), status
