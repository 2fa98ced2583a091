# Main.py
""""" Entry point for the String Calculator.

   Responsibilities:
   - Evaluate an expression given on the command line and print the result
   - Otherwise load configuration and start the Qt GUI

"""""
import argparse
import logging
import sys

from calculator import config_manager as config_manager, error as E, MathEngine as MathEngine

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="string-calculator",
        description="Evaluate arithmetic expressions such as '1,5 + 2' or '(2*(3+4))-9'.",
    )
    parser.add_argument("expression", nargs="*",
                        help="expression to evaluate; without one the GUI starts")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def run_once(expression):
    """Print the result of one expression. Returns the process exit status."""
    try:
        print(MathEngine.calculate(expression, config_manager.load_nesting_depth()))
        return 0
    except E.MathError as e:
        print(f"Error {e.code}: {e.message}", file=sys.stderr)
        return 1


def main(argv=None):

    """
    Parse arguments, then either evaluate once or hand over to the GUI.
    - Keep this thin: no business logic here.
    """

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.expression:
        # Spaces only separate digits visually, so the arguments are simply joined
        return run_once(" ".join(args.expression))

    logger.info("Config loaded: %s", config_manager.load_setting_value("all"))

    # Imported here so the command line mode works without a display
    from calculator import UI as UI

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
