"""
Control server for driving the client from outside the process.

A JSON-lines TCP server: every line is a command such as
{"type": "navigate", "page": "wallet"} or {"type": "get_state"}. Commands
are handed to the Qt main thread through a queued signal and run through
the AppController; the reply is one JSON line.

Usage:
    from thalexa.infrastructure.control_server import CommandHandler, run_control_server

    command_handler = CommandHandler(controller)
    control_server = run_control_server(command_handler, host="localhost", port=29999)
"""

import json
import logging
import threading
import socketserver
from enum import Enum
from typing import Any, Dict

from PyQt6.QtCore import QCoreApplication, QObject, QTimer, pyqtSignal

from thalexa.application.controller import AppController
from thalexa.core.exceptions import ThalexaException
from thalexa.domain.value_objects.operation import AuthAttempt, LedgerOperation

log = logging.getLogger("ThalexaLogger")


def _describe(result: Any) -> Any:
    """Turn a command result into something JSON can carry."""
    if isinstance(result, LedgerOperation):
        value = result.result
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        return {
            "operation_id": result.id,
            "kind": result.kind.value,
            "state": result.state.value,
            "result": value,
            "error": str(result.error) if result.error else None,
        }
    if isinstance(result, AuthAttempt):
        return {
            "provider": result.provider,
            "state": result.state.value,
            "address": result.credential.address if result.credential else None,
            "error": str(result.error) if result.error else None,
        }
    if isinstance(result, Enum):
        return result.value
    return result


class CommandHandler(QObject):
    """Handles commands from the control server in the Qt main thread."""

    command_received = pyqtSignal(dict, object)

    def __init__(self, controller: AppController):
        super().__init__()
        self.controller = controller
        self.command_received.connect(self._handle_command)

    def _handle_command(self, command: dict, response_callback):
        """Handle a command in the Qt thread."""
        try:
            result = self._execute_command(command)
            response_callback({"status": "success", "result": _describe(result)})
        except ThalexaException as e:
            log.warning(f"Control server command rejected: {e}")
            response_callback({"status": "error", "message": str(e)})
        except Exception as e:
            log.error(f"Control server command error: {e}")
            response_callback({"status": "error", "message": str(e)})

    def _execute_command(self, command: Dict[str, Any]) -> Any:
        """Execute a query or a controller command and return the result."""
        cmd_type = command.get("type")

        if cmd_type == "get_state":
            return self.controller.store.state.to_dict()
        elif cmd_type == "get_page":
            return self.controller.router.snapshot()
        elif cmd_type == "get_notifications":
            unread_only = bool(command.get("unread_only", False))
            return [n.to_dict() for n in self.controller.notifications.list(unread_only)]
        elif cmd_type == "get_pending":
            return [_describe(op) for op in self.controller.pipeline.pending_operations()]
        elif cmd_type == "close":
            QTimer.singleShot(100, QCoreApplication.quit)
            return True
        else:
            return self.controller.dispatch_dict(command)


class ControlServerHandler(socketserver.StreamRequestHandler):
    """Handler for control server connections."""

    def handle(self):
        """Handle incoming connections."""
        log.info(f"Control server: New connection from {self.client_address}")
        while True:
            try:
                line = self.rfile.readline()
                if not line:
                    break

                command = json.loads(line.decode("utf-8"))
                if not isinstance(command, dict):
                    raise ValueError("command must be a JSON object")
                log.debug(f"Control server received command: {command.get('type')}")

                response = {}
                event = threading.Event()

                def callback(result):
                    response.update(result)
                    event.set()

                self.server.command_handler.command_received.emit(command, callback)
                if not event.wait(timeout=30):
                    response = {"status": "error", "message": "Timed out waiting for the main thread"}

                self._reply(response)

            except (json.JSONDecodeError, ValueError) as e:
                log.error(f"Control server bad request: {e}")
                self._reply({"status": "error", "message": f"Invalid command: {e}"})
            except OSError as e:
                log.error(f"Control server connection error: {e}")
                break

    def _reply(self, response: Dict[str, Any]) -> None:
        self.wfile.write((json.dumps(response, default=str) + "\n").encode("utf-8"))
        self.wfile.flush()


class ThreadedTCPServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    """Threaded TCP server for handling control connections."""

    allow_reuse_address = True
    daemon_threads = True


def run_control_server(
    command_handler: CommandHandler,
    host: str = "localhost",
    port: int = 29999,
) -> ThreadedTCPServer:
    """
    Run the control server in a separate thread.

    Args:
        command_handler: The CommandHandler living in the Qt main thread
        host: Host address to bind to
        port: Port to bind to (0 picks a free one)

    Returns:
        The ThreadedTCPServer instance
    """
    server = ThreadedTCPServer((host, port), ControlServerHandler)
    server.command_handler = command_handler

    thread = threading.Thread(target=server.serve_forever, name="ControlServer", daemon=True)
    thread.start()

    log.info(f"Control server running on {host}:{server.server_address[1]}")
    return server
