"""Routine store over the ZeroMQ store microservice."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

import zmq

from models import Routine
from store import RoutineStore

logger = logging.getLogger(__name__)

DEFAULT_HOST = os.getenv("ROUTINER_STORE_HOST", "localhost")
DEFAULT_PORT = int(os.getenv("ROUTINE_STORE_PORT", "5570"))
DEFAULT_PUB_PORT = int(os.getenv("ROUTINE_STORE_PUB_PORT", "5571"))

TIMEOUT_MS = 1500


class RemoteStore(RoutineStore):
    """
    Commands go over a fresh REQ socket per call (bounded by TIMEOUT_MS) so a
    lost reply never wedges the socket state. Change notices arrive on a SUB
    socket and are drained by poll(), which the UI loop calls periodically.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        pub_port: int = DEFAULT_PUB_PORT,
        context: Optional[zmq.Context] = None,
    ):
        super().__init__()
        self.host = host
        self.port = port
        self.pub_port = pub_port
        self._context = context or zmq.Context.instance()
        self._subscriber = None

    # ---------- Low-level send helpers ----------
    def _make_socket(self):
        socket = self._context.socket(zmq.REQ)
        socket.setsockopt(zmq.RCVTIMEO, TIMEOUT_MS)
        socket.setsockopt(zmq.SNDTIMEO, TIMEOUT_MS)
        socket.setsockopt(zmq.LINGER, 0)
        socket.connect(f"tcp://{self.host}:{self.port}")
        return socket

    def _send_json(self, payload: dict):
        socket = self._make_socket()
        try:
            socket.send_string(json.dumps(payload))
            raw = socket.recv()
            return json.loads(raw.decode("utf-8")), None
        except zmq.error.Again:
            return None, f"Timed out contacting routine store on port {self.port}."
        except (zmq.ZMQError, ValueError) as exc:
            return None, f"Routine store error on port {self.port}: {exc}"
        finally:
            socket.close()

    def _request(self, payload: dict):
        response, error = self._send_json(payload)
        if error:
            return None, error
        if not isinstance(response, dict):
            return None, f"Routine store error on port {self.port}: reply is not an object."
        if response.get("status") != "ok":
            return None, response.get("error", "Unknown routine store error.")
        return response, None

    # ---------- Backend hooks ----------
    def _fetch_routines(self):
        response, error = self._request({"request_type": "list_routines"})
        if error:
            return None, error
        return [Routine.from_doc(doc) for doc in response.get("routines", [])], None

    def _fetch_completions(self, year, month):
        response, error = self._request(
            {"request_type": "list_completions", "year": year, "month": month}
        )
        if error:
            return None, error
        return response.get("completions", {}), None

    def _write(self, request_type, **payload):
        response, error = self._request({"request_type": request_type, **payload})
        if error:
            return None, error
        return response.get("result"), None

    # ---------- Push notices ----------
    def connect(self):
        if self._subscriber is not None:
            return
        subscriber = self._context.socket(zmq.SUB)
        subscriber.setsockopt(zmq.LINGER, 0)
        subscriber.setsockopt_string(zmq.SUBSCRIBE, "")
        subscriber.connect(f"tcp://{self.host}:{self.pub_port}")
        self._subscriber = subscriber

    def close(self):
        if self._subscriber is not None:
            self._subscriber.close()
            self._subscriber = None

    def poll(self) -> int:
        """Drain pending change notices without blocking; returns how many were handled."""
        if self._subscriber is None:
            return 0
        handled = 0
        while self._subscriber.poll(timeout=0):
            raw = self._subscriber.recv()
            try:
                notice = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, ValueError):
                logger.warning("Ignoring malformed change notice: %r", raw[:80])
                continue
            if not isinstance(notice, dict):
                logger.warning("Ignoring change notice that is not an object: %r", raw[:80])
                continue
            self.handle_notice(notice)
            handled += 1
        return handled

    def handle_notice(self, notice: dict):
        topic = notice.get("topic")
        if topic == "routines":
            self.notify_routines()
        elif topic == "completions":
            self.notify_completions(notice.get("date"))
        elif topic == "all":
            self.notify_routines()
            self.notify_completions()
        else:
            logger.debug("Unknown change topic %r", topic)
