"""
Simple curl-like script to fetch Gemini pages.

Usage: cd examples && PYTHONPATH=.. python -m curl --help
"""

import argparse
import logging
import sys
from functools import partial
from typing import Optional
from urllib.parse import quote

from gemline import client
from gemline.exceptions import ClientError
from gemline.text import GEMINI_MIME_TYPE, Line, LineKind


logger = logging.getLogger("curl")


# pylint: disable=too-few-public-methods
class Command:
    """
    Curl command to execute.

    Only 1 command is supported: making a request.
    """

    url: str

    # Logging level. Only DEBUG, INFO, WARNING and ERROR are supported.
    logging_level: int

    # Verify the certificate of the server.
    verify: bool

    # Directory of trusted self-signed certificates. None if self-signed certificates
    # are not trusted.
    cert_dir: Optional[str]

    def __init__(
        self, url: str, logging_level: int, verify: bool, cert_dir: Optional[str] = None
    ) -> None:
        super().__init__()

        assert logging_level in [
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
        ]

        self.url = url
        self.logging_level = logging_level
        self.verify = verify
        self.cert_dir = cert_dir


def _command_from_cli() -> Command:
    """
    Parse CLI arguments as a command.
    :return: parsed command.
    """

    parser = argparse.ArgumentParser(prog="curl")
    parser.add_argument("url", help="Gemini URL to fetch")
    parser.add_argument(
        "-v", "--verbosity", action="count", default=0, help="Increase output verbosity"
    )
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_true",
        help="Do not verify the certificate of the server",
    )
    parser.add_argument(
        "--certs",
        metavar="DIR",
        help="Trust self-signed certificates on first use and store them in DIR",
    )
    args = parser.parse_args()

    if args.verbosity == 0:
        # Default verbosity.
        logging_level = logging.ERROR
    elif args.verbosity == 1:
        logging_level = logging.WARNING
    elif args.verbosity == 2:
        logging_level = logging.INFO
    else:  # >= 3
        logging_level = logging.DEBUG

    return Command(
        url=args.url,
        logging_level=logging_level,
        verify=not args.insecure,
        cert_dir=args.certs,
    )


def _configure_logger(logging_level: int, logger: logging.Logger):
    """Configure a logger to use the logging level and our desired output format."""
    # pylint: disable=redefined-outer-name
    logger.setLevel(logging_level)
    handler = logging.StreamHandler()
    handler.setLevel(logging_level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def render_line(line: Line, link_number: int) -> Optional[str]:
    """
    Render a text/gemini line for the terminal.

    :param line: the line to render.
    :param link_number: number to show in front of a link.
    :return: the rendered line or None if the line is not shown.
    """
    if line.kind == LineKind.PREFORMATTING_TOGGLE:
        return None
    if line.kind == LineKind.LINK:
        return f"[{link_number}] {line.text or line.link} <{line.link}>"
    if line.kind == LineKind.HEADING:
        return "#" * line.level + " " + line.text
    if line.kind == LineKind.UNORDERED_LIST_ITEM:
        return "  * " + line.text
    if line.kind == LineKind.QUOTE:
        return "  | " + line.text
    return line.text


def _print_gemini_text(response: client.Response):
    link_number = 0
    for line in response.body.lines():
        if line.kind == LineKind.LINK:
            link_number += 1
        rendered = render_line(line, link_number)
        if rendered is not None:
            print(rendered)


def execute_command(command: Command) -> int:
    """
    Execute the parsed command.
    :param command: command options including URL to fetch.
    :return: exit code
    """

    cert_store = None
    if command.cert_dir:
        cert_store = client.SelfSignedCertFileStore(command.cert_dir)

    prompt = None
    with client.sync_request(
        command.url, cert_store=cert_store, verify=command.verify
    ) as response:
        logger.info("received %s", response)

        if response.category == client.Category.SUCCESS:
            if response.mime_type == GEMINI_MIME_TYPE:
                _print_gemini_text(response)
            else:
                sys.stdout.buffer.write(response.body.read())
        elif response.category == client.Category.INPUT:
            prompt = response.meta
        elif response.category == client.Category.REDIRECT:
            print(f"redirect to {response.meta}")
        elif response.category == client.Category.TEMPORARY_FAILURE:
            print(f"temporary failure: {response.status.name} {response.meta}")
            return 1
        elif response.category == client.Category.PERMANENT_FAILURE:
            print(f"permanent failure: {response.status.name} {response.meta}")
            return 1
        elif response.category == client.Category.CERTIFICATE_REQUIRED:
            print(f"client certificate required: {response.meta}")
            return 1

    # The answer is sent on a new connection once the prompting one is closed.
    if prompt is not None:
        answer = input(prompt)
        query_url = command.url.split("?", 1)[0] + "?" + quote(answer)
        return execute_command(
            Command(query_url, command.logging_level, command.verify, command.cert_dir)
        )

    return 0


def main() -> int:
    command = _command_from_cli()

    # Configure logging.
    configure_logger = partial(_configure_logger, command.logging_level)
    configure_logger(logger)
    configure_logger(logging.getLogger(client.constants.LOGGER_NAME))

    try:
        return execute_command(command)
    except (ClientError, OSError) as err:
        logger.error("request to %s failed: %s", command.url, err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
