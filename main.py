"""
Myelin Gestures - hand gesture signals from a webcam.

Entry point for running the pipeline from the command line.
"""
import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

logger = logging.getLogger("main")


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Myelin Gestures - hand gesture signals from a webcam",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay a YAML recording of detection events instead of using the camera",
    )

    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show camera feed with landmark overlay",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every result, not just gesture changes",
    )

    return parser.parse_args()


class ResultPrinter:
    """Logs gesture changes (or every result in debug mode)."""

    def __init__(self, verbose: bool = False):
        self._verbose = verbose
        self._last = None

    def __call__(self, result):
        if self._verbose:
            logger.info("%s", result.to_dict())
            return
        key = (result.hand_detected, result.gesture)
        if key == self._last:
            return
        self._last = key
        if not result.hand_detected:
            logger.info("Hand lost")
        else:
            x, y = result.cursor_position
            logger.info(
                "Gesture: %-12s | %s hand | cursor (%.2f, %.2f) | velocity %.2f",
                result.gesture.name, result.handedness, x, y, result.velocity,
            )


def run_replay(path, on_result):
    """Run the pipeline over a recorded event file."""
    from gestures import GestureRecognizer, ReplaySource

    recognizer = GestureRecognizer()
    source = ReplaySource.from_yaml(path)
    logger.info("Replaying %d events from %s", len(source.events), path)
    recognizer.start(source, on_result)
    recognizer.stop()
    return 0


def run_camera(config, on_result, preview: bool):
    """Run the pipeline on the live camera until interrupted."""
    from gestures import GestureRecognizer, LandmarkSourceError, MediaPipeLandmarkSource

    recognizer = GestureRecognizer()
    source = MediaPipeLandmarkSource(config)
    shutdown = threading.Event()

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        logger.info("Received signal %d, shutting down...", signum)
        shutdown.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        recognizer.start(source, on_result)
    except LandmarkSourceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    logger.info("Pipeline running. Press Ctrl+C to stop.")
    try:
        if preview:
            import cv2
            while not shutdown.is_set():
                frame = source.annotated_frame()
                if frame is not None:
                    cv2.imshow("Myelin Gestures", frame)
                if cv2.waitKey(15) & 0xFF == ord('q'):
                    break
            cv2.destroyAllWindows()
        else:
            shutdown.wait()
    finally:
        recognizer.stop()

    return 0


def main():
    """Main entry point."""
    args = parse_args()

    from gestures import load_config
    from gestures.log import setup_logging

    config = load_config(args.config)

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera

    setup_logging(config.logging.level, config.logging.file)

    printer = ResultPrinter(verbose=args.debug)
    if args.replay:
        return run_replay(args.replay, printer)
    return run_camera(config, printer, args.preview)


if __name__ == "__main__":
    sys.exit(main())
