"""
Thalexa - Main entry point.

Runs the client core headless on a Qt event loop with:
- Dependency Injection
- Persisted application state
- JSON-lines control server for driving pages and commands
"""

import argparse
import logging
import logging.config
import os
import signal
import socket
import sys
import threading
import time

from PyQt6.QtCore import QCoreApplication, QTimer

# Track Ctrl+C presses for force quit
_ctrl_c_count = 0
_shutdown_watchdog = None

_LOGGING_CONF = os.path.join(os.path.dirname(os.path.abspath(__file__)), "thalexa", "logging.conf")

# Set logging from config file
logging.config.fileConfig(_LOGGING_CONF, disable_existing_loggers=False)

# Create logger
log = logging.getLogger("ThalexaLogger")


def _is_port_available(port: int, host: str = "localhost") -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((host, port))
            return True
    except OSError:
        return False


def _find_available_port(start: int = 29999, end: int = 30099, host: str = "localhost") -> int:
    """Find an available port in the given range."""
    for port in range(start, end + 1):
        if _is_port_available(port, host):
            return port
    raise RuntimeError(f"No available port found in range {start}-{end}")


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Thalexa client core")
    parser.add_argument(
        "--config",
        type=str,
        default="config.ini",
        help="Path to config.ini (default: ./config.ini)"
    )
    parser.add_argument(
        "--storage",
        type=str,
        default=None,
        help="Directory for the persisted state (overrides [STORAGE] path)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Control server port (auto-detect if not specified)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Control server host (default: localhost)"
    )
    parser.add_argument(
        "--no-server",
        action="store_true",
        help="Disable the control server"
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Don't start the background balance/health refresh"
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    try:
        from thalexa.core.config import AppConfig
        app_config = AppConfig(args.config)
        if args.storage:
            app_config.override("STORAGE", "path", args.storage)
        log.setLevel(app_config.log_level.upper())

        if args.port is not None:
            control_port = args.port
        else:
            control_port = _find_available_port(start=29999, end=30099, host=args.host)

        print("\n" + "=" * 60)
        print("  THALEXA - Started")
        print("=" * 60)
        print(f"  Network:         {app_config.ledger_config.network}")
        print(f"  Ledger:          {app_config.ledger_config.rpc_url}")
        print(f"  Storage:         {app_config.storage_config.path}")
        print(f"  Control Port:    {control_port if not args.no_server else 'disabled'}")
        print("=" * 60 + "\n")

        # Initialize Qt application
        app = QCoreApplication(sys.argv)
        app.setApplicationName("Thalexa")

        def shutdown_watchdog(timeout_seconds):
            """Force exit if graceful shutdown takes too long."""
            time.sleep(timeout_seconds)
            print(f"\nShutdown timeout ({timeout_seconds}s) - forcing exit!", flush=True)
            os._exit(1)

        def handle_sigint(signum, frame):
            global _ctrl_c_count, _shutdown_watchdog
            _ctrl_c_count += 1
            if _ctrl_c_count == 1:
                print("\nCtrl+C pressed, shutting down (press again to force)...", flush=True)
                _shutdown_watchdog = threading.Thread(
                    target=shutdown_watchdog, args=(3,), daemon=True
                )
                _shutdown_watchdog.start()
                app.quit()
            else:
                print("\nForce exit!", flush=True)
                os._exit(1)

        signal.signal(signal.SIGINT, handle_sigint)
        signal.signal(signal.SIGTERM, handle_sigint)

        # Timer lets Python process signals while Qt event loop runs
        timer = QTimer()
        timer.timeout.connect(lambda: None)
        timer.start(50)

        from thalexa.application.bootstrap import initialize_app
        bootstrap = initialize_app(app_config)
        bootstrap.start(background_refresh=not args.no_refresh)

        control_server = None
        if not args.no_server:
            from thalexa.infrastructure.control_server import CommandHandler, run_control_server
            command_handler = CommandHandler(bootstrap.controller)
            control_server = run_control_server(
                command_handler,
                host=args.host,
                port=control_port
            )
            log.info(f"Control server started on {args.host}:{control_port}")

        exit_code = app.exec()

        if control_server is not None:
            control_server.shutdown()
            control_server.server_close()
        bootstrap.shutdown()
        sys.exit(exit_code)

    except Exception as e:
        log.fatal(f"Fatal error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
