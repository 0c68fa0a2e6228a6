#!/usr/bin/env python3
"""
Unified CLI for child vaccination tracking.

Commands:
  schedule   - Show the immunization schedule for a date of birth
  signup     - Create an account (verified by a simulated email OTP)
  login      - Log in to an existing account
  logout     - Log out
  whoami     - Show the logged-in account
  add-child  - Add a child profile and schedule its reminders
  children   - List your children with their next due vaccine
  child      - Show one child's schedule and status
  mark-done  - Record a dose as given
  remove-child - Delete a child profile
  reminders  - Show reminders that are due to go out
"""

import argparse
import getpass
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from models import (
    VACCINE_SCHEDULE,
    AuthError,
    ChildProfile,
    EventDue,
    FormError,
    InvalidDate,
    LocalAuthService,
    Session,
    Status,
    calculate_vaccine_schedule,
    check_status,
    clear_session_user,
    days_remaining,
    delete_child,
    load_store,
    mark_reminders_sent,
    pending_reminders,
    save_child_profile,
    save_session_user,
    schedule_reminders,
    set_event_completed,
    validate_birth_date,
)
from models import auth
from models.app_logger import setup_logging
from models.config import Settings

LOG = logging.getLogger(__name__)

OTP_ATTEMPTS = 3

# =============================================================================
# Formatting helpers
# =============================================================================


def format_status(status: Status) -> str:
    """Format a status for display (e.g. 'DUE SOON')."""
    return status.name.replace("_", " ")


def format_days_remaining(days: Optional[int]) -> str:
    """Format days until due for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"

    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (use YYYY-MM-DD)")


# =============================================================================
# Tables
# =============================================================================


def make_schedule_table(statuses: List[EventDue]) -> List[List[str]]:
    """Convert event statuses to table rows, in schedule order."""
    rows = []
    for due in statuses:
        age = "-"
        if due.index < len(VACCINE_SCHEDULE):
            age = VACCINE_SCHEDULE[due.index].age_label
        remaining = "-"
        if due.status != Status.COMPLETED:
            remaining = format_days_remaining(due.days_remaining)
        rows.append(
            [
                str(due.index),
                due.event.name,
                age,
                due.event.due_date.isoformat(),
                format_status(due.status),
                remaining,
            ]
        )
    return rows


def make_children_table(
    children: List[ChildProfile], as_of: date, due_soon_days: int = 7
) -> List[List[str]]:
    """Convert child profiles to summary rows."""
    rows = []
    for child in children:
        next_due = child.next_due(as_of, due_soon_days)
        rows.append(
            [
                str(child.id),
                child.name,
                child.dob,
                child.age_label(as_of),
                f"{child.completed_count}/{len(child.schedule)}",
                next_due.event.name if next_due else "-",
                next_due.event.due_date.isoformat() if next_due else "-",
                format_status(next_due.status) if next_due else "ALL DONE",
            ]
        )
    return rows


SCHEDULE_HEADERS = ["#", "Vaccine", "Age", "Due", "Status", "Remaining"]


# =============================================================================
# Schedule command
# =============================================================================


def cmd_schedule(args, settings: Settings):
    """Show the immunization schedule for a date of birth."""
    events = calculate_vaccine_schedule(args.dob)
    as_of = args.as_of or date.today()

    statuses = [
        EventDue(
            index=i,
            event=event,
            status=check_status(as_of, event.due_date, settings.due_soon_days),
            days_remaining=days_remaining(as_of, event.due_date),
        )
        for i, event in enumerate(events)
    ]

    print(f"Date of birth: {args.dob}")
    print(f"As of: {as_of.isoformat()}")
    print(f"Vaccines: {len(events)}")
    print()
    print(tabulate(make_schedule_table(statuses), headers=SCHEDULE_HEADERS, tablefmt="simple"))

    return 0


# =============================================================================
# Account commands
# =============================================================================


def cmd_signup(args, settings: Settings):
    """Create an account, confirming the email with a simulated OTP."""
    service = LocalAuthService(args.store, delay=settings.simulated_delay)
    session = Session()

    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")

    auth.begin_signup(session, service, args.name, args.email, password, confirm)
    print("OTP sent to your email!")
    # Delivery is simulated; show the message that would have been sent
    _, code = service.outbox[-1]
    print(f"  (simulated email to {args.email}: your code is {code})")

    for attempt in range(OTP_ATTEMPTS):
        entered = input("Enter OTP (or 'resend'): ").strip()
        if entered.lower() == "resend":
            auth.resend_otp(session, service)
            _, code = service.outbox[-1]
            print(f"New OTP sent!  (simulated email: your code is {code})")
            continue
        try:
            user = auth.verify_otp(session, service, entered)
        except FormError as e:
            print(f"Error: {e.message}")
            continue
        save_session_user(args.store, user["id"])
        print(f"Account created successfully! Welcome, {user['name']}.")
        return 0

    print("Error: Too many failed attempts, signup cancelled")
    return 1


def cmd_login(args, settings: Settings):
    """Log in to an existing account."""
    service = LocalAuthService(args.store, delay=settings.simulated_delay)
    session = Session()

    password = args.password or getpass.getpass("Password: ")
    user = auth.login(session, service, args.email, password)

    save_session_user(args.store, user["id"])
    print(f"Login successful! Welcome back, {user['name']}.")
    return 0


def cmd_logout(args, settings: Settings):
    """Log out."""
    clear_session_user(args.store)
    print("Logged out successfully!")
    return 0


def cmd_whoami(args, settings: Settings):
    """Show the logged-in account."""
    user = load_store(args.store).current_user
    if user is None:
        print("Not logged in.")
        return 1
    print(f"{user.name} <{user.email}>")
    return 0


# =============================================================================
# Child commands
# =============================================================================


def _require_user(store):
    user = store.current_user
    if user is None:
        print("Error: Not logged in (run 'login' or 'signup' first)")
    return user


def cmd_add_child(args, settings: Settings):
    """Add a child profile and schedule reminders for its doses."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1

    today = args.as_of or date.today()
    dob = validate_birth_date(args.dob, today=today)
    if not args.name.strip():
        print("Error: Child name is required")
        return 1

    child = ChildProfile.create(
        user.id, args.name.strip(), dob.isoformat(), args.gender, args.blood_group
    )

    print(f"Adding child profile to {args.store}:")
    print(f"  Name:          {child.name}")
    print(f"  Date of birth: {child.dob}")
    if child.gender:
        print(f"  Gender:        {child.gender}")
    if child.blood_group:
        print(f"  Blood group:   {child.blood_group}")
    print(f"  Vaccines:      {len(child.schedule)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_child_profile(args.store, child)
    reminders = schedule_reminders(
        child.schedule, today, settings.reminder_days, child_name=child.name
    )
    print(f"Child profile added successfully! (id {child.id})")
    print(f"Reminders scheduled: {len(reminders)}")

    return 0


def cmd_children(args, settings: Settings):
    """List the logged-in user's children."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1

    as_of = args.as_of or date.today()
    children = store.children_for(user.id)

    print(f"Account: {user.name}")
    print(f"Children: {len(children)}")
    print()

    if not children:
        print("No child profiles found.")
        return 0

    headers = ["ID", "Name", "DOB", "Age", "Given", "Next Vaccine", "Due", "Status"]
    print(
        tabulate(
            make_children_table(children, as_of, settings.due_soon_days),
            headers=headers,
            tablefmt="simple",
        )
    )
    return 0


def _get_own_child(store, user, child_id: int) -> Optional[ChildProfile]:
    child = store.get_child(child_id)
    if child is None or child.user_id != user.id:
        print(f"Error: Unknown child id {child_id}")
        return None
    return child


def cmd_child(args, settings: Settings):
    """Show one child's schedule with statuses."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1
    child = _get_own_child(store, user, args.child_id)
    if child is None:
        return 1

    as_of = args.as_of or date.today()
    statuses = child.get_all_event_status(as_of, settings.due_soon_days)
    if args.due_only:
        statuses = [s for s in statuses if s.is_due]

    print(f"Child: {child.name} (born {child.dob}, age {child.age_label(as_of)})")
    print(f"Given: {child.completed_count}/{len(child.schedule)}")
    print()

    if not statuses:
        print("Nothing due.")
        return 0

    print(tabulate(make_schedule_table(statuses), headers=SCHEDULE_HEADERS, tablefmt="simple"))
    return 0


def cmd_mark_done(args, settings: Settings):
    """Record a dose as given (or undo that)."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1
    child = _get_own_child(store, user, args.child_id)
    if child is None:
        return 1

    try:
        event = child.get_event(args.index)
    except IndexError as e:
        print(f"Error: {e}")
        return 1

    completed = not args.undo
    verb = "given" if completed else "not given"
    print(f"Marking {event.name} for {child.name} as {verb}")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    set_event_completed(args.store, child.id, args.index, completed)
    print("Schedule updated.")
    return 0


def cmd_remove_child(args, settings: Settings):
    """Delete a child profile."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1
    child = _get_own_child(store, user, args.child_id)
    if child is None:
        return 1

    print(f"Removing {child.name} (born {child.dob}) from {args.store}")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    delete_child(args.store, child.id)
    print("Child profile removed.")
    return 0


def cmd_reminders(args, settings: Settings):
    """Show reminders due to go out, optionally recording them as sent."""
    store = load_store(args.store)
    user = _require_user(store)
    if user is None:
        return 1

    today = args.as_of or date.today()
    rows = []
    for child in store.children_for(user.id):
        reminders = pending_reminders(
            child.schedule, today, settings.reminder_days, child_name=child.name
        )
        for reminder in reminders:
            rows.append(
                [
                    child.name,
                    reminder.vaccine,
                    reminder.due_date.isoformat(),
                    reminder.remind_on.isoformat(),
                ]
            )
        if reminders and args.mark_sent:
            for reminder in reminders:
                LOG.info(
                    "Reminder for %s: %s due %s (simulated)",
                    child.name,
                    reminder.vaccine,
                    reminder.due_date.isoformat(),
                )
            mark_reminders_sent(args.store, child.id, [r.index for r in reminders])

    if not rows:
        print("No reminders due.")
        return 0

    headers = ["Child", "Vaccine", "Due", "Remind On"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    if args.mark_sent:
        print()
        print(f"Marked {len(rows)} reminder(s) as sent.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Child vaccination tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schedule 2024-01-01
  %(prog)s signup --name "Asha Rao" --email asha@example.com
  %(prog)s login asha@example.com
  %(prog)s add-child "Meera" 2024-01-01 --gender female
  %(prog)s children
  %(prog)s child 1 --due-only
  %(prog)s mark-done 1 0
  %(prog)s reminders --mark-sent
""",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=settings.store_path,
        help=f"Path to data file (default: {settings.store_path})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log simulated emails and reminders",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Schedule subcommand
    schedule_parser = subparsers.add_parser(
        "schedule", help="Show the immunization schedule for a date of birth"
    )
    schedule_parser.add_argument("dob", type=str, help="Date of birth (YYYY-MM-DD)")
    schedule_parser.add_argument(
        "--as-of", type=iso_date, help="Status as of date (default: today)"
    )

    # Signup subcommand
    signup_parser = subparsers.add_parser("signup", help="Create an account")
    signup_parser.add_argument("--name", required=True, help="Your name")
    signup_parser.add_argument("--email", required=True, help="Email address")
    signup_parser.add_argument(
        "--password", help="Password (prompted for when omitted)"
    )

    # Login subcommand
    login_parser = subparsers.add_parser("login", help="Log in")
    login_parser.add_argument("email", help="Email address")
    login_parser.add_argument("--password", help="Password (prompted for when omitted)")

    subparsers.add_parser("logout", help="Log out")
    subparsers.add_parser("whoami", help="Show the logged-in account")

    # Add child subcommand
    add_child_parser = subparsers.add_parser("add-child", help="Add a child profile")
    add_child_parser.add_argument("name", help="Child's name")
    add_child_parser.add_argument("dob", help="Date of birth (YYYY-MM-DD)")
    add_child_parser.add_argument("--gender", help="Gender")
    add_child_parser.add_argument("--blood-group", help="Blood group (e.g., 'O+')")
    add_child_parser.add_argument(
        "--as-of", type=iso_date, help="Treat this date as today"
    )
    add_child_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Children subcommand
    children_parser = subparsers.add_parser("children", help="List your children")
    children_parser.add_argument(
        "--as-of", type=iso_date, help="Status as of date (default: today)"
    )

    # Child subcommand
    child_parser = subparsers.add_parser("child", help="Show a child's schedule")
    child_parser.add_argument("child_id", type=int, help="Child id")
    child_parser.add_argument(
        "--as-of", type=iso_date, help="Status as of date (default: today)"
    )
    child_parser.add_argument(
        "--due-only",
        action="store_true",
        help="Only show overdue and due-soon vaccines",
    )

    # Mark done subcommand
    mark_parser = subparsers.add_parser("mark-done", help="Record a dose as given")
    mark_parser.add_argument("child_id", type=int, help="Child id")
    mark_parser.add_argument("index", type=int, help="Schedule row number (#)")
    mark_parser.add_argument(
        "--undo", action="store_true", help="Mark the dose as not given"
    )
    mark_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Remove child subcommand
    remove_parser = subparsers.add_parser("remove-child", help="Delete a child profile")
    remove_parser.add_argument("child_id", type=int, help="Child id")
    remove_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without saving",
    )

    # Reminders subcommand
    reminders_parser = subparsers.add_parser(
        "reminders", help="Show reminders that are due to go out"
    )
    reminders_parser.add_argument(
        "--as-of", type=iso_date, help="Treat this date as today"
    )
    reminders_parser.add_argument(
        "--mark-sent",
        action="store_true",
        help="Record the listed reminders as sent",
    )

    return parser


COMMANDS = {
    "schedule": cmd_schedule,
    "signup": cmd_signup,
    "login": cmd_login,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "add-child": cmd_add_child,
    "children": cmd_children,
    "child": cmd_child,
    "mark-done": cmd_mark_done,
    "remove-child": cmd_remove_child,
    "reminders": cmd_reminders,
}


def main(argv: Optional[List[str]] = None):
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging("INFO" if args.verbose else settings.log_level)

    # Dispatch to command handler
    try:
        return COMMANDS[args.command](args, settings)
    except FormError as e:
        print(f"Error: {e.message}")
    except (InvalidDate, AuthError) as e:
        print(f"Error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
