import argparse
import logging
import sys
from typing import List, Optional

from PyQt5.QtWidgets import QApplication

from IV_Libs.EditorLib.image_engine import ImageEngine
from IV_Libs.EditorLib.image_viewer_window import ImageViewerWindow
from IV_Libs.constants import APP_NAME


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Interactive image viewer and editor")
    parser.add_argument("image", nargs="?", help="image file to open on startup")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity (default: WARNING)",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args(sys.argv[1:])
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv[:1])
    engine = ImageEngine()
    window = ImageViewerWindow(engine)
    if args.image:
        if engine.open_file(args.image):
            window.set_buttons_enabled(True)
            window.show_filename(args.image)
            window.refresh_image()
        window.show_status(engine.status)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
