"""Adium Log Report - adium_log_report.py

Turn Adium's per-session XML chat logs into one browsable HTML report.

Features
--------
- Walk Adium's Logs tree, one report section per account
- Group conversations by date, then by conversation partner
- Date window filtering (defaults to the last 8 days)
- Suppress repeated messages across files and accounts (SHA-1 fingerprints)
- Tolerant XML parsing: a broken session file is skipped, never fatal
- Nickname highlighting
- Jinja2 HTML template (overridable), YAML config file

Outputs
-------
- A single self-contained HTML document on stdout (or --output FILE)

Usage
-----
  python adium_log_report.py > adium_logs.html
  python adium_log_report.py --account 'Jabber.+booking' --exclude 'conference|live' \\
      --fromdate 2011-07-01 --user david --auser 'David Morel' > jabber_logs.html

Example of a full path to a session file:

  /Users/david/Library/Application Support/Adium 2.0/Users/David Morel/Logs/
    Jabber.david.morel@jabber.booking.com/john.doe@jabber.booking.com/
      john.doe@jabber.booking.com (2011-03-29T14.40.23+0200).chatlog/
        john.doe@jabber.booking.com (2011-03-29T14.40.23+0200).xml

Requirements
------------
- Python 3.10+
- python-dateutil, beautifulsoup4 + lxml, jinja2, pyyaml, tqdm

License: MIT
"""

from __future__ import annotations

import argparse
import hashlib
import html
import logging
import os
import re
import sys
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional

import yaml
from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from jinja2 import Environment
from tqdm import tqdm


# Configure logging
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity flags.

    Messages go to stderr: stdout carries the HTML report.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


# =============================================================================
# TIME NORMALIZATION
# =============================================================================

DAY_SECONDS = 86400
END_OF_DAY_SECONDS = DAY_SECONDS - 1
DEFAULT_WINDOW_DAYS = 8

CANONICAL_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


class InvalidDateError(ValueError):
    """A date string that the permissive parser could not make sense of."""

    def __init__(self, raw: Any):
        super().__init__(f"Invalid date: {raw!r}")
        self.raw = raw


def _parse_epoch(raw: str) -> int:
    try:
        dt = date_parser.parse(raw)
        # Naive datetimes are taken as local time
        return int(dt.timestamp())
    except (ValueError, OverflowError, OSError) as e:
        raise InvalidDateError(raw) from e


def parse_bound(raw: Optional[str], is_end: bool, now: Optional[int] = None) -> int:
    """Parse a date window bound into epoch seconds.

    Accepts anything dateutil understands ("2011-07-01", "1 Jul 2011",
    ISO-8601 with offset...). An end bound covers its whole day.
    Missing bounds default to "now - 8 days" (start) and "now" (end).
    """
    if now is None:
        now = int(time.time())

    if raw is None or not str(raw).strip():
        return now if is_end else now - DEFAULT_WINDOW_DAYS * DAY_SECONDS

    epoch = _parse_epoch(str(raw).strip())
    return epoch + END_OF_DAY_SECONDS if is_end else epoch


def parse_timestamp(raw: str) -> int:
    """Parse a message timestamp (ISO-8601 with offset) to epoch seconds."""
    if not raw:
        raise InvalidDateError(raw)
    return _parse_epoch(raw)


def to_canonical(epoch: float) -> str:
    return datetime.fromtimestamp(epoch).strftime(CANONICAL_FORMAT)


def to_date(epoch: float) -> str:
    return datetime.fromtimestamp(epoch).strftime(DATE_FORMAT)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [fromdate, todate] window in epoch seconds."""
    fromdate: int
    todate: int

    def contains(self, epoch: float) -> bool:
        return self.fromdate <= epoch <= self.todate

    @classmethod
    def from_args(cls, fromdate: Optional[str], todate: Optional[str],
                  now: Optional[int] = None) -> "DateWindow":
        if now is None:
            now = int(time.time())
        return cls(
            fromdate=parse_bound(fromdate, is_end=False, now=now),
            todate=parse_bound(todate, is_end=True, now=now),
        )


# =============================================================================
# SESSION FILE EXTRACTION
# =============================================================================

LOG_EXTENSION = ".xml"

PARTNER_RE = re.compile(r"^(.+?)\s")


@dataclass(frozen=True)
class MessageRecord:
    timestamp: str  # YYYY-MM-DD HH:MM:SS, local time
    alias: str
    text: str  # HTML-escaped

    @property
    def date(self) -> str:
        return self.timestamp[:10]


@dataclass
class SessionLog:
    """Surviving messages of one session file, in document order."""
    path: Path
    partner: str
    modified: str  # file last-modified date, YYYY-MM-DD
    first_sent: str = ""
    messages: list[MessageRecord] = field(default_factory=list)


def partner_identifier(file_name: str) -> str:
    """Other party's login (or room name): everything before the first space.

    >>> partner_identifier("john.doe@jabber.booking.com (2011-03-29T14.40.23+0200).xml")
    'john.doe@jabber.booking.com'
    """
    m = PARTNER_RE.match(file_name)
    return m.group(1) if m else file_name


def iter_session_files(root: Path) -> Iterator[Path]:
    """Lazily walk an account directory, yielding every file.

    Directories (partner folders, .chatlog bundles) are descended into,
    entries are visited in name order.
    """
    try:
        entries = sorted(root.iterdir())
    except OSError as e:
        logger.debug(f"  [SKIP] Cannot list {root}: {e}")
        return

    for entry in entries:
        if entry.is_symlink() and entry.is_dir():
            logger.debug(f"  [SKIP] {entry}: symlinked directory")
            continue
        if entry.is_dir():
            yield from iter_session_files(entry)
        elif entry.is_file():
            yield entry


def load_message_nodes(path: Path) -> list:
    """Parse a session file and return its <message> elements.

    Uses lxml's recovering XML parser (through BeautifulSoup) so that a
    truncated or slightly broken log still yields what can be read.
    """
    with path.open("rb") as f:
        soup = BeautifulSoup(f, features="xml")
    return soup.find_all("message")


def extract_session(
    path: Path,
    window: DateWindow,
    exclude: Optional[re.Pattern] = None,
    mtime: Optional[float] = None,
) -> Optional[SessionLog]:
    """Read one session file into a SessionLog.

    Returns None when the file is not a session log, is excluded, was last
    modified before the window start, cannot be read or parsed, or has no
    message inside the window. Never raises for a bad file.

    Example message:
      <message sender="john.doe@jabber.booking.com" time="2011-03-29T14:40:23+02:00" alias="John Doe">
         <div><span style="font-family: Helvetica; font-size: 12pt;">hi David</span></div>
      </message>
    """
    if not path.name.endswith(LOG_EXTENSION):
        return None

    if exclude is not None and exclude.search(path.name):
        logger.debug(f"  [SKIP] {path.name}: excluded")
        return None

    try:
        if mtime is None:
            mtime = path.stat().st_mtime

        if mtime < window.fromdate:
            logger.debug(f"  [SKIP] {path.name}: last modified before {to_date(window.fromdate)}")
            return None

        nodes = load_message_nodes(path)
    except Exception as e:
        logger.debug(f"  [SKIP] {path.name}: {e}")
        return None

    if not nodes:
        logger.debug(f"  [SKIP] {path.name}: no messages")
        return None

    session = SessionLog(path=path, partner=partner_identifier(path.name), modified=to_date(mtime))

    for node in nodes:
        alias = node.get("alias") or node.get("sender")
        try:
            sent = parse_timestamp(node.get("time"))
        except InvalidDateError as e:
            logger.debug(f"  {path.name}: message skipped ({e})")
            continue

        if not alias or not window.contains(sent):
            continue

        stamp = to_canonical(sent)
        if not session.first_sent:
            session.first_sent = stamp

        session.messages.append(
            MessageRecord(timestamp=stamp, alias=alias, text=html.escape(node.get_text()))
        )

    if not session.messages:
        logger.debug(f"  [SKIP] {path.name}: no messages in date range")
        return None

    return session


# =============================================================================
# DEDUPLICATION
# =============================================================================

def fingerprint(alias: str, text: str) -> str:
    """SHA-1 over length-prefixed (alias, text).

    Length prefixes keep ("ab", "c") and ("a", "bc") apart.
    """
    payload = f"{len(alias)}:{alias}|{len(text)}:{text}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class SeenMessages:
    """Fingerprints of every message accepted during one run.

    Shared by all accounts: a message already reported anywhere is
    suppressed everywhere after.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def seen_or_record(self, key: str) -> bool:
        """Return True if key was already recorded, record it otherwise."""
        if key in self._seen:
            return True
        self._seen.add(key)
        return False

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def clear(self) -> None:
        self._seen.clear()


# =============================================================================
# AGGREGATION
# =============================================================================

@dataclass(frozen=True)
class Caption:
    partner: str
    sent: str  # earliest message of this date/partner
    first_sent: str  # first surviving message of the session file
    file_name: str
    modified: str

    @property
    def text(self) -> str:
        return f"Discussion with {self.partner} on {self.sent} (started on {self.first_sent})"


@dataclass
class ConversationGroup:
    caption: Caption
    messages: list[MessageRecord] = field(default_factory=list)


@dataclass
class AccountLog:
    """Messages of one account: date -> partner -> ConversationGroup."""
    account: str
    dates: dict[str, dict[str, ConversationGroup]] = field(default_factory=dict)
    files_read: int = 0
    files_skipped: int = 0
    duplicates: int = 0

    @property
    def message_count(self) -> int:
        return sum(len(g.messages) for partners in self.dates.values() for g in partners.values())

    def sorted_dates(self) -> list[str]:
        return sorted(self.dates)

    def sorted_partners(self, date: str) -> list[str]:
        return sorted(self.dates.get(date, {}))


def insert(
    aggregate: AccountLog,
    date: str,
    partner: str,
    message: MessageRecord,
    caption_if_absent: Caption,
) -> ConversationGroup:
    """Append a message to its date/partner group.

    The caption is only used when the group is created; an existing
    group keeps its file, session start and last-modified date. Only
    its "sent" stamp moves back when an earlier message arrives.
    """
    partners = aggregate.dates.setdefault(date, {})
    group = partners.get(partner)
    if group is None:
        group = partners[partner] = ConversationGroup(caption=caption_if_absent)
    elif message.timestamp < group.caption.sent:
        group.caption = replace(group.caption, sent=message.timestamp)
    group.messages.append(message)
    return group


def build_account_log(
    account: str,
    files: Iterable[Path],
    window: DateWindow,
    seen: SeenMessages,
    exclude: Optional[re.Pattern] = None,
) -> AccountLog:
    """Extract, dedup and group every session file of one account."""
    log = AccountLog(account=account)

    for path in files:
        session = extract_session(path, window, exclude)
        if session is None:
            log.files_skipped += 1
            continue
        log.files_read += 1

        for msg in session.messages:
            if seen.seen_or_record(fingerprint(msg.alias, msg.text)):
                log.duplicates += 1
                continue

            caption = Caption(
                partner=session.partner,
                sent=msg.timestamp,
                first_sent=session.first_sent,
                file_name=path.name,
                modified=session.modified,
            )
            insert(log, msg.date, session.partner, msg, caption)

    return log


# =============================================================================
# HTML REPORT - TEMPLATE SYSTEM
# =============================================================================

# Message text is escaped at extraction time, everything else with |e
_jinja_env = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)


def get_template_dir() -> Path:
    """Get the templates directory path.

    Looks for templates in:
    1. ./templates/ (relative to script)
    2. ~/.config/adium-log-report/templates/
    3. Falls back to built-in default
    """
    script_dir = Path(__file__).parent
    local_templates = script_dir / "templates"
    if local_templates.exists():
        return local_templates

    config_templates = Path.home() / ".config" / "adium-log-report" / "templates"
    if config_templates.exists():
        return config_templates

    return local_templates


@lru_cache(maxsize=4)
def load_template(template_name: str) -> Optional[str]:
    """Load an external template file, or None if there is none."""
    template_path = get_template_dir() / template_name

    if template_path.exists():
        logger.debug(f"Loading external template: {template_path}")
        return template_path.read_text(encoding="utf-8")

    return None


DEFAULT_ACCOUNT_TEMPLATE = '''<h1>Adium logs for user: {{ adium_user|e }}, account: {{ account|e }}</h1>
<div class="accordion">
{% for date, groups in sections %}
<h2><a href="#">Logs for date: {{ date }}</a></h2>
<div>
{% for partner, group in groups %}
<table border="0" width="100%" cellspacing="0" class="msg_table">
<caption>{{ group.caption.text|e }}<br /><i>file: {{ group.caption.file_name|e }} last-modified: {{ group.caption.modified }}</i></caption>
<tr align="left" valign="top"><th>Time</th><th>From</th><th>Message</th></tr>
{% for msg in group.messages %}
<tr><td class="date">{{ msg.timestamp }}</td><td class="alias{% if is_highlighted(msg.alias) %} nickhighlight{% endif %}">{{ msg.alias|e }}</td><td>{{ msg.text }}</td></tr>
{% endfor %}
</table>
{% endfor %}
</div>
{% endfor %}
</div>
'''


DEFAULT_DOCUMENT_TEMPLATE = '''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title|e }}</title>
<style>
    body {
        font: 12px "Lucida Grande", Lucida, Verdana, sans-serif;
    }

    h1 {
        text-align: left;
        margin-bottom: 10px;
        font: italic bold 15px "Lucida Grande", Lucida, Verdana, sans-serif;
        color: grey;
        padding: 3px;
    }

    h2 {
        text-align: left;
        width: 100%;
        margin: 0 0 10px 0;
        font: bold 14px "Lucida Grande", Lucida, Verdana, sans-serif;
        color: #3560ac;
        padding: 3px;
        cursor: pointer;
    }

    h2 a {
        color: inherit;
        text-decoration: none;
    }

    .accordion > h2.collapsed + div {
        display: none;
    }

    caption {
        text-align: center;
        width: 100%;
        margin-bottom: 10px;
        font: italic bold 13px "Lucida Grande", Lucida, Verdana, sans-serif;
        color: #3560ac;
        background-color: #fff49d;
        padding: 3px;
    }

    table.msg_table {
        margin-bottom: 20px;
        width: 100%;
    }

    .msg_table td, .msg_table th {
        border-bottom: 1px solid #eee;
        border-collapse: collapse;
        padding-right: 20px;
        vertical-align: top;
    }

    .date, .alias {
        width: 1%;
        white-space: nowrap;
    }

    .nickhighlight {
        color: red;
    }
</style>
</head>
<body>
{% for fragment in fragments %}
{{ fragment }}
{% endfor %}
<script>
    document.querySelectorAll('.accordion > h2').forEach(function (heading) {
        heading.addEventListener('click', function (event) {
            event.preventDefault();
            heading.classList.toggle('collapsed');
        });
    });
</script>
</body>
</html>
'''


def get_report_template(template_name: str, default: str):
    """Compile an external template if present, the built-in one otherwise."""
    return _jinja_env.from_string(load_template(template_name) or default)


def render_account(
    adium_user: str,
    account_log: AccountLog,
    highlight: Optional[re.Pattern] = None,
) -> str:
    """Render one account as an HTML fragment.

    Dates and partners are sorted lexicographically; messages keep the
    order they were collected in.
    """
    sections = [
        (date, [(partner, account_log.dates[date][partner])
                for partner in account_log.sorted_partners(date)])
        for date in account_log.sorted_dates()
    ]

    is_highlighted: Callable[[str], bool] = (
        (lambda alias: highlight.search(alias) is not None) if highlight is not None
        else (lambda alias: False)
    )

    template = get_report_template("account.html", DEFAULT_ACCOUNT_TEMPLATE)
    return template.render(
        adium_user=adium_user,
        account=account_log.account,
        sections=sections,
        is_highlighted=is_highlighted,
    )


def render_document(fragments: Iterable[str], title: str = "Adium logs") -> str:
    template = get_report_template("report.html", DEFAULT_DOCUMENT_TEMPLATE)
    return template.render(title=title, fragments=list(fragments))


def write_report(document: str, output: Optional[str] = None) -> None:
    """Write the report as UTF-8 to a file, or to stdout for None / "-"."""
    if output is None or output == "-":
        sys.stdout.flush()
        sys.stdout.buffer.write(document.encode("utf-8"))
        sys.stdout.buffer.flush()
        return

    Path(output).expanduser().write_text(document, encoding="utf-8")


# =============================================================================
# LOG DIRECTORY RESOLUTION
# =============================================================================

ADIUM_USERS_SUBDIR = Path("Library") / "Application Support" / "Adium 2.0" / "Users"


class LogDirectoryError(Exception):
    """The Adium users/logs directory cannot be resolved."""


def default_users_dir(user: str) -> Path:
    return Path("/Users") / user / ADIUM_USERS_SUBDIR


def resolve_logs_dir(users_dir: Path, adium_user: Optional[str] = None) -> tuple[str, Path]:
    """Find the Logs directory of an Adium user.

    Without an explicit Adium user, the only non-hidden entry of the
    users directory is used; anything else is an error.
    """
    if not users_dir.is_dir():
        raise LogDirectoryError(f"Cannot find Adium users directory: {users_dir}")

    if not adium_user:
        candidates = sorted(p for p in users_dir.iterdir() if not p.name.startswith("."))
        if len(candidates) == 1 and candidates[0].is_dir():
            adium_user = candidates[0].name
        else:
            raise LogDirectoryError(
                "More than one Adium user, or no user in logs directory.\n"
                "Please have a look and/or use the --auser option. I found these:\n\t"
                + "\n\t".join(p.name for p in candidates)
            )

    logs_dir = users_dir / adium_user / "Logs"
    if not logs_dir.is_dir():
        raise LogDirectoryError(f"Cannot find specified user directory in {users_dir}")

    return adium_user, logs_dir


def select_accounts(logs_dir: Path, pattern: re.Pattern) -> list[Path]:
    """Account directories whose name matches pattern, sorted by name."""
    return sorted(
        p for p in logs_dir.iterdir()
        if p.is_dir() and pattern.search(p.name)
    )


# =============================================================================
# CONFIG FILE SUPPORT
# =============================================================================

DEFAULT_CONFIG = {
    "user": None,
    "adium_user": None,
    "base_dir": None,
    "account": ".+",
    "exclude": None,
    "fromdate": None,
    "todate": None,
    "nickhighlight": None,
    "verbose": False,
    "quiet": False,
}


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from YAML file."""
    config = DEFAULT_CONFIG.copy()

    if config_path is None:
        # Look for config in current directory or home
        for path in [Path(".adium-log-report.yaml"), Path.home() / ".adium-log-report.yaml"]:
            if path.exists():
                config_path = path
                break

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                logger.warning(f"Failed to load config: {config_path} is not a mapping, using defaults")
                return config
            config.update(file_config)
            logger.debug(f"Loaded config from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config: {e}")

    return config


def save_default_config(path: Path) -> None:
    """Save default configuration to YAML file."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False)
    logger.info(f"Saved default config to {path}")


def compile_pattern(pattern: Any) -> Optional[re.Pattern]:
    # YAML may hand over ints or floats
    return re.compile(str(pattern)) if pattern is not None and str(pattern) else None


# =============================================================================
# MAIN
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Parse Adium logfiles and turn them into one HTML report, "
                    "with one table per conversation, sorted by account and date.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s > adium_logfile.html
  %(prog)s --account 'Jabber.+booking' --exclude 'conference|live' --fromdate 2011-07-01 \\
      --user david --auser 'David Morel' > ~/tmp/jabber_logs.html
  %(prog)s --base-dir ~/adium-backup/Users --nickhighlight 'david|morel' -o logs.html
        """
    )

    # Locating the logs
    ap.add_argument("--user", help="Unix user name for finding the base directory (default: $USER)")
    ap.add_argument("--auser", dest="adium_user",
                    help="Adium user name (not needed if there is only one Adium user)")
    ap.add_argument("--base-dir", dest="base_dir",
                    help="Adium 'Users' directory (default: ~USER/Library/Application Support/Adium 2.0/Users)")

    # Filtering options
    ap.add_argument("--account", help="Regex for the account(s) to parse, eg. 'Jabber.+' (default: all)")
    ap.add_argument("--exclude", help="Regex for conversations to exclude (partner login or chatroom name)")
    ap.add_argument("--fromdate", help="Start date, any format dateutil understands (default: 8 days ago)")
    ap.add_argument("--todate", help="End date, inclusive (default: now)")
    ap.add_argument("--nickhighlight", help="Regex matching your own nicknames, which will be highlighted")

    # Output
    ap.add_argument("--output", "-o", help="Write the report to this file instead of stdout")

    # Config
    ap.add_argument("--config", type=str, help="Path to config file (.adium-log-report.yaml)")
    ap.add_argument("--save-config", type=str, metavar="PATH", help="Save default config to file")

    # Verbosity options
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Suppress non-error output")

    args = ap.parse_args(argv)

    # Handle save-config
    if args.save_config:
        setup_logging(verbose=True)
        save_default_config(Path(args.save_config))
        return 0

    # Load config file; command-line values win
    config = load_config(Path(args.config) if args.config else None)
    for key in ("user", "adium_user", "base_dir", "account", "exclude",
                "fromdate", "todate", "nickhighlight"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value

    quiet = args.quiet or config.get("quiet", False)
    setup_logging(verbose=args.verbose or config.get("verbose", False), quiet=quiet)

    try:
        account_re = compile_pattern(config.get("account")) or re.compile(".+")
        exclude_re = compile_pattern(config.get("exclude"))
        highlight_re = compile_pattern(config.get("nickhighlight"))
    except re.error as e:
        logger.error(f"Invalid regular expression: {e}")
        return 3

    try:
        window = DateWindow.from_args(config.get("fromdate"), config.get("todate"))
    except InvalidDateError as e:
        logger.error(str(e))
        return 4

    if config.get("base_dir"):
        users_dir = Path(str(config["base_dir"])).expanduser()
    else:
        users_dir = default_users_dir(config.get("user") or os.environ.get("USER", ""))

    try:
        adium_user, logs_dir = resolve_logs_dir(users_dir, config.get("adium_user"))
        accounts = select_accounts(logs_dir, account_re)
    except (LogDirectoryError, OSError) as e:
        logger.error(str(e))
        return 2

    logger.info(f"Found {len(accounts)} account(s) in {logs_dir}")
    logger.info(f"Date window: {to_canonical(window.fromdate)} to {to_canonical(window.todate)}")

    seen = SeenMessages()
    fragments: list[str] = []
    total_messages = 0
    total_duplicates = 0
    skipped = 0

    for account_dir in accounts:
        files = tqdm(
            iter_session_files(account_dir),
            desc=account_dir.name[:30],
            unit="file",
            ncols=80,
            leave=False,
            disable=quiet,
        )
        account_log = build_account_log(account_dir.name, files, window, seen, exclude_re)
        fragments.append(render_account(adium_user, account_log, highlight_re))

        total_messages += account_log.message_count
        total_duplicates += account_log.duplicates
        skipped += account_log.files_skipped
        logger.info(f"  [OK] {account_dir.name} ({account_log.message_count:,} messages, "
                    f"{account_log.files_read} file(s))")

    write_report(render_document(fragments, title=f"Adium logs for user: {adium_user}"), args.output)

    # Summary
    logger.info("")
    logger.info("=" * 50)
    logger.info("Report complete!")
    logger.info(f"  Accounts:   {len(accounts)}")
    logger.info(f"  Messages:   {total_messages:,}")
    if total_duplicates:
        logger.info(f"  Duplicates: {total_duplicates:,}")
    if skipped:
        logger.debug(f"  Skipped:    {skipped} file(s)")
    logger.info(f"  Output:     {args.output or 'stdout'}")
    logger.info("=" * 50)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
