"""
Random password generator.
Generates one or more passwords of a given length from alphanumeric and special
characters, and writes them to the screen, a file and/or the clipboard.

The passwords are drawn from the general-purpose ``random`` module, so they are
meant for everyday use and not as cryptographic secrets.
"""

import argparse
import logging
import os
import platform
import random
import shutil
import string
import subprocess
import sys
from typing import Callable, Protocol, TextIO

__version__ = "0.1.0"

PASSWORD_LEN = 30
PASSWORD_NUM = 1
LINE_SEPARATOR = "\r\n"

# Standard set used with default settings.
BASE_CHARSET = (
    string.ascii_uppercase + string.ascii_lowercase + string.digits + "*&^%$#@!"
)
# Appended when the -e/--extend option is set.
EXTENDED_SPECIALS = "~`()_-+={[}]|\\:;\"'<,>.?/"

EXIT_DECLINED = 1
EXIT_DELIVERY = 3
EXIT_CLIPBOARD = 4


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class PasswdGenError(Exception):
    """Base class for errors reported to the user."""

    exit_code = 1


class OutputExistsError(PasswdGenError):
    """The output file exists and the user declined to overwrite it."""

    exit_code = EXIT_DECLINED


class DeliveryError(PasswdGenError):
    """Passwords could not be written to their destination."""

    exit_code = EXIT_DELIVERY


class ClipboardError(DeliveryError):
    exit_code = EXIT_CLIPBOARD


def setup_logging(
    log_file: str | None = None, verbose: bool = False, silent: bool = False
) -> None:
    """Configure logging for the application.

    Args:
        log_file: Optional file to write logs to
        verbose: Whether to enable verbose logging
        silent: Only report warnings and errors
    """
    if verbose:
        log_level = logging.DEBUG
    elif silent:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    log_format = "%(asctime)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level, format=log_format, handlers=handlers, force=True
    )


def build_alphabet(extend: bool) -> tuple[str, int]:
    """Return the working alphabet and the length of its base part."""
    if extend:
        return BASE_CHARSET + EXTENDED_SPECIALS, len(BASE_CHARSET)
    return BASE_CHARSET, len(BASE_CHARSET)


def generate_password(
    length: int, extend: bool, rng: RandomSource | None = None
) -> str:
    """Generate a single password of the given length.

    One random index is drawn per character. With extended characters enabled,
    a first draw that lands in the extended region is shifted back into the
    base alphabet, so a password never starts with an extended special character.

    Args:
        length: Number of characters, zero gives an empty password
        extend: Whether to include the extended special characters
        rng: Random source with a ``randrange`` method (default: new ``random.Random``)

    Returns:
        The generated password
    """
    if rng is None:
        rng = random.Random()
    alphabet, base_length = build_alphabet(extend)

    password = []
    for position in range(length):
        idx = rng.randrange(len(alphabet))
        if extend and position == 0 and idx >= base_length:
            idx -= len(EXTENDED_SPECIALS)
        password.append(alphabet[idx])

    return "".join(password)


def generate_batch(
    length: int, count: int, extend: bool, rng: RandomSource | None = None
) -> str:
    """Generate ``count`` passwords joined by CR/LF, without a trailing separator."""
    if rng is None:
        rng = random.Random()
    return LINE_SEPARATOR.join(
        generate_password(length, extend, rng) for _ in range(count)
    )


def confirm(
    prompt: str,
    default: str = "y",
    input_stream: TextIO | None = None,
    output_stream: TextIO | None = None,
) -> bool:
    """Ask a yes/no question and return True for yes.

    An empty reply (or end of input) selects the default. Replies longer than
    a short word are treated as no.
    """
    if not default or default[0].lower() not in ("y", "n"):
        return False
    default = default.lower()
    input_stream = input_stream or sys.stdin
    output_stream = output_stream or sys.stderr

    output_stream.write(prompt)
    output_stream.flush()
    while True:
        line = input_stream.readline()
        if len(line) > 5:
            return False
        reply = line.strip().lower()
        if reply == "":
            return default[0] == "y"
        if reply in ("y", "yes"):
            return True
        if reply in ("n", "no"):
            return False
        output_stream.write('Reply with "y, yes or n, no" in UPPERCASE or lowercase.\n')
        output_stream.write(f"Input [y/n] or [enter] for default {default}: ")
        output_stream.flush()


def check_outfile(
    path: str, overwrite: bool, confirm_fn: Callable[[str], bool] = confirm
) -> None:
    """Make sure an existing output file may be overwritten.

    Raises:
        OutputExistsError: If the file exists and the user declines
    """
    if not path or not os.path.exists(path) or path == os.devnull or overwrite:
        return
    if not confirm_fn(f"File: '{path}' exists, do you want to overwrite? [Y/n]: "):
        raise OutputExistsError(
            f"File '{path}' not overwritten. To overwrite use -y or --overwrite option."
        )


def write_to_file(path: str, text: str) -> None:
    """Write the passwords to a file exactly as generated."""
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise DeliveryError(f"Error writing to {path}: {exc}") from exc


def clipboard_command() -> list[str] | None:
    """Return the clipboard command for this platform, or None if there is none."""
    system = platform.system()
    if system == "Darwin":
        return ["pbcopy"]
    if system == "Windows":
        return ["clip"]
    if system == "Linux":
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard"]
        if shutil.which("xsel"):
            return ["xsel", "--clipboard", "--input"]
    return None


def copy_to_clipboard(text: str) -> None:
    """Send the passwords to the system clipboard.

    Raises:
        ClipboardError: If no clipboard tool is available or it fails
    """
    command = clipboard_command()
    if command is None:
        raise ClipboardError(f"No clipboard tool found for {platform.system()}")

    logging.debug(f"Copying to clipboard with {command[0]}")
    try:
        subprocess.run(command, input=text, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ClipboardError(f"Error writing to clipboard: {exc}") from exc


def non_negative_int(value: str) -> int:
    """argparse type for counts and lengths."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passwd_gen",
        description=(
            "Generates random passwords with alphanumeric and special characters."
        ),
    )

    password_group = parser.add_argument_group("Password Options")
    password_group.add_argument(
        "-l",
        "--length",
        type=non_negative_int,
        default=PASSWORD_LEN,
        help=f"Length of password (default: {PASSWORD_LEN} characters)",
    )
    password_group.add_argument(
        "-n",
        "--number",
        type=non_negative_int,
        default=PASSWORD_NUM,
        help=f"Number of passwords (default: {PASSWORD_NUM} password)",
    )
    password_group.add_argument(
        "-e",
        "--extend",
        action="store_true",
        help="Enable extended special characters beyond default",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "-o", "--outfile", default="", help="Write output to a file instead of stdout"
    )
    output_group.add_argument(
        "-y",
        "--overwrite",
        action="store_true",
        help="Overwrite an existing output file without asking",
    )
    output_group.add_argument(
        "-c", "--clipboard", action="store_true", help="Send passwords to clipboard"
    )
    output_group.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Silent mode: no display of password on screen",
    )
    output_group.add_argument("--log", help="Log file to write to")
    output_group.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log, args.verbose, args.silent)
    except OSError as exc:
        parser.error(f"cannot open log file: {exc}")

    try:
        check_outfile(args.outfile, args.overwrite)

        logging.debug(
            f"Generating {args.number} password(s) of length {args.length} "
            f"(extended: {args.extend})"
        )
        buffer = generate_batch(args.length, args.number, args.extend)

        if args.outfile:
            write_to_file(args.outfile, buffer)
            logging.info(f"Passwords written to: {args.outfile}")

        if args.clipboard:
            copy_to_clipboard(buffer)
            logging.info("Passwords written to: clipboard")
    except PasswdGenError as exc:
        logging.error(str(exc))
        return exc.exit_code

    if not args.silent:
        # keep CR/LF separators as generated on every platform
        reconfigure = getattr(sys.stdout, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(newline="")
        sys.stdout.write(buffer + "\n")
        sys.stdout.flush()

    return 0


if __name__ == "__main__":
    sys.exit(main())
