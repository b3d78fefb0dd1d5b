#!/usr/bin/env python3
"""Routine store microservice: REP socket for reads/writes, PUB socket for change notices."""
import json
import os
import sys
from datetime import datetime

import zmq

from repo_json import JSONRepo
from store import apply_write

WRITE_TYPES = ("create_routine", "update_routine", "delete_routine", "set_completion")
READ_TYPES = ("list_routines", "list_completions")


# =========================
# Request / Response helpers
# =========================

def make_error_response(message):
    return {
        "status": "error",
        "error": message
    }


def make_success_response(**fields):
    response = {"status": "ok"}
    response.update(fields)
    return response


def serialize_response(response_dict):
    """
    Deterministic JSON encoding:
      - sort_keys=True → stable key order
      - separators=(',', ':') → no extra spaces
    """
    return json.dumps(
        response_dict,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def parse_request_bytes(raw_bytes):
    """
    Decode raw bytes into a Python dict, or return an error response.
    """
    try:
        request = json.loads(raw_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None, make_error_response("Invalid JSON in request body.")
    if not isinstance(request, dict):
        return None, make_error_response("Request body must be a JSON object.")
    return request, None


def is_valid_date(value):
    if not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def validate_routine_fields(fields):
    """Type-check the routine fields that are present; returns a message or None."""
    for key in ("name", "description", "color", "icon", "timeOfDay"):
        if key in fields and not isinstance(fields[key], str):
            return f"'fields.{key}' must be a string."
    if "days" in fields and not isinstance(fields["days"], list):
        return "'fields.days' must be a list of weekdays (0-6)."
    return None


def validate_request(request):
    """
    Validate the request for its request_type.
    Returns (request_type, payload, error_or_None).
    """
    request_type = request.get("request_type")
    if request_type not in WRITE_TYPES + READ_TYPES:
        return None, None, make_error_response(
            f"Unsupported request_type '{request_type}'."
        )

    if request_type == "list_routines":
        return request_type, {}, None

    if request_type == "list_completions":
        year = request.get("year")
        month = request.get("month")
        if not isinstance(year, int) or not isinstance(month, int) or not 1 <= month <= 12:
            return None, None, make_error_response(
                "'year' and 'month' (1-12) must be integers."
            )
        return request_type, {"year": year, "month": month}, None

    if request_type in ("create_routine", "update_routine"):
        fields = request.get("fields")
        if not isinstance(fields, dict):
            return None, None, make_error_response("'fields' must be an object.")
        field_error = validate_routine_fields(fields)
        if field_error is not None:
            return None, None, make_error_response(field_error)
        if request_type == "create_routine":
            name = fields.get("name")
            if not isinstance(name, str) or not name.strip():
                return None, None, make_error_response("'fields.name' is required.")
            return request_type, {"fields": fields}, None

    if request_type in ("update_routine", "delete_routine"):
        routine_id = request.get("id")
        if not isinstance(routine_id, str) or not routine_id:
            return None, None, make_error_response("'id' must be a non-empty string.")
        payload = {"id": routine_id}
        if request_type == "update_routine":
            payload["fields"] = request["fields"]
        return request_type, payload, None

    # set_completion
    date_str = request.get("date")
    routine_id = request.get("routine_id")
    done = request.get("done")
    if not is_valid_date(date_str):
        return None, None, make_error_response("'date' must be a YYYY-MM-DD string.")
    if not isinstance(routine_id, str) or not routine_id:
        return None, None, make_error_response("'routine_id' must be a non-empty string.")
    if not isinstance(done, bool):
        return None, None, make_error_response("'done' must be a boolean.")
    return request_type, {"date": date_str, "routine_id": routine_id, "done": done}, None


def change_notice(request_type, payload):
    """Topic message published after a successful write."""
    if request_type == "set_completion":
        return {"topic": "completions", "date": payload["date"]}
    if request_type == "delete_routine":
        return {"topic": "all"}
    return {"topic": "routines"}


def handle_message(repo, raw_bytes):
    """
    Bytes in → (bytes out, change notice or None).
    No sockets involved, so this is what the tests drive.
    """
    request, parse_error = parse_request_bytes(raw_bytes)
    if parse_error is not None:
        return serialize_response(parse_error), None

    request_type, payload, validation_error = validate_request(request)
    if validation_error is not None:
        return serialize_response(validation_error), None

    if request_type == "list_routines":
        return serialize_response(make_success_response(routines=repo.routine_docs())), None

    if request_type == "list_completions":
        completions = repo.completions_for_month(payload["year"], payload["month"])
        return serialize_response(make_success_response(completions=completions)), None

    result, error = apply_write(repo, request_type, payload)
    if error is not None:
        return serialize_response(make_error_response(error)), None
    response = make_success_response(result=result)
    return serialize_response(response), change_notice(request_type, payload)


# =========================
# ZeroMQ server & quit logic
# =========================

def create_sockets(port, pub_port):
    context = zmq.Context()
    socket = context.socket(zmq.REP)
    socket.bind(f"tcp://*:{port}")
    publisher = context.socket(zmq.PUB)
    publisher.bind(f"tcp://*:{pub_port}")
    return context, socket, publisher


def is_quit_signal(raw_request: bytes) -> bool:
    trimmed = raw_request.strip().lower()
    return trimmed in (b"q", b'"q"')


def run_server(repo, port="5570", pub_port="5571"):
    """
    Main server loop.

    - Normal request: JSON → handle_message(), then publish any change notice.
    - Quit request: raw message 'q' → respond once, then exit.
    """
    context, socket, publisher = create_sockets(port, pub_port)
    print(f"[routine-store] Listening on port {port}, publishing on {pub_port}...", file=sys.stderr)
    print(f"[routine-store] Data file: {repo.path}", file=sys.stderr)

    try:
        while True:
            raw_request = socket.recv()

            if is_quit_signal(raw_request):
                socket.send(serialize_response(
                    make_success_response(message="Routine store shutting down.")
                ))
                print("[routine-store] Received quit signal 'q'. Exiting.", file=sys.stderr)
                break

            notice = None
            try:
                response_bytes, notice = handle_message(repo, raw_request)
            except Exception as e:
                error_response = make_error_response(f"Internal error: {str(e)}")
                response_bytes = serialize_response(error_response)

            socket.send(response_bytes)
            if notice is not None:
                publisher.send(serialize_response(notice))

    except KeyboardInterrupt:
        print("\n[routine-store] Interrupted via keyboard.", file=sys.stderr)
    finally:
        publisher.close()
        socket.close()
        context.term()


def main():
    port = os.getenv("ROUTINE_STORE_PORT", "5570")
    pub_port = os.getenv("ROUTINE_STORE_PUB_PORT", "5571")
    repo = JSONRepo(os.getenv("ROUTINER_DATA", "data/routines.json"))
    run_server(repo, port, pub_port)


if __name__ == "__main__":
    main()
