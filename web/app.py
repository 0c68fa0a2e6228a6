"""Flask web application for child vaccination tracking."""

import logging
from datetime import date
from functools import wraps
from pathlib import Path

from flask import (
    Flask,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    VACCINE_SCHEDULE,
    AuthError,
    ChildProfile,
    FormError,
    InvalidDate,
    LocalAuthService,
    Session,
    Status,
    calculate_vaccine_schedule,
    check_status,
    load_store,
    save_child_profile,
    schedule_reminders,
    set_event_completed,
    validate_birth_date,
)
from models import auth
from models.app_logger import setup_logging
from models.config import Settings

LOG = logging.getLogger(__name__)

settings = Settings.from_env()
setup_logging(settings.log_level)

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config.update(
    STORE_PATH=str(settings.store_path),
    SIMULATED_DELAY=settings.simulated_delay,
    REMINDER_DAYS=settings.reminder_days,
    DUE_SOON_DAYS=settings.due_soon_days,
)


def store_path() -> Path:
    return Path(app.config["STORE_PATH"])


def auth_service() -> LocalAuthService:
    return LocalAuthService(store_path(), delay=app.config["SIMULATED_DELAY"])


def get_auth_session() -> Session:
    """Load this client's auth state from the signed Flask session."""
    return Session.from_dict(session.get("auth"))


def save_auth_session(auth_session: Session) -> None:
    session["auth"] = auth_session.to_dict()


def login_required(view):
    """Redirect to the login page unless a user is logged in."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if not get_auth_session().is_authenticated:
            flash("Please log in first", "error")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapped


def format_days(days):
    """Format days until due (e.g. 'in 12d', '3d overdue', 'today')."""
    if days is None:
        return "—"
    if days == 0:
        return "today"
    if days < 0:
        return f"{abs(days)}d overdue"
    return f"in {days}d"


def status_color(status: Status) -> str:
    """Get Tailwind color classes for status."""
    colors = {
        Status.OVERDUE: "bg-red-100 text-red-800 border-red-200",
        Status.DUE_SOON: "bg-yellow-100 text-yellow-800 border-yellow-200",
        Status.UPCOMING: "bg-blue-100 text-blue-800 border-blue-200",
        Status.COMPLETED: "bg-green-100 text-green-800 border-green-200",
    }
    return colors.get(status, "bg-gray-100 text-gray-800")


def status_badge_color(status: Status) -> str:
    """Get Tailwind color classes for status badge."""
    colors = {
        Status.OVERDUE: "bg-red-500 text-white",
        Status.DUE_SOON: "bg-yellow-500 text-white",
        Status.UPCOMING: "bg-blue-500 text-white",
        Status.COMPLETED: "bg-green-500 text-white",
    }
    return colors.get(status, "bg-gray-500 text-white")


# Register template filters
app.jinja_env.filters["format_days"] = format_days
app.jinja_env.filters["status_color"] = status_color
app.jinja_env.filters["status_badge_color"] = status_badge_color


@app.context_processor
def inject_user():
    return {"current_user": get_auth_session().user}


@app.route("/")
def index():
    """Landing page: the vaccine timeline and a date-of-birth form."""
    return render_template("index.html", vaccines=VACCINE_SCHEDULE)


@app.route("/schedule")
def schedule_preview():
    """Schedule for any date of birth, without saving anything."""
    dob = request.args.get("dob", "")
    try:
        events = calculate_vaccine_schedule(dob)
    except InvalidDate as e:
        flash(str(e), "error")
        return redirect(url_for("index"))

    today = date.today()
    rows = [
        {
            "index": i,
            "event": event,
            "age": VACCINE_SCHEDULE[i].age_label,
            "status": check_status(today, event.due_date, app.config["DUE_SOON_DAYS"]),
        }
        for i, event in enumerate(events)
    ]
    return render_template("schedule.html", dob=dob, rows=rows)


@app.route("/api/schedule")
def api_schedule():
    """JSON schedule for ?dob=YYYY-MM-DD."""
    dob = request.args.get("dob", "")
    try:
        events = calculate_vaccine_schedule(dob)
    except InvalidDate as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"dob": dob, "schedule": [e.to_dict() for e in events]})


# =============================================================================
# Accounts
# =============================================================================


@app.route("/signup", methods=["GET", "POST"])
def signup():
    if request.method == "GET":
        return render_template("signup.html", errors={}, form={})

    auth_session = get_auth_session()
    try:
        auth.begin_signup(
            auth_session,
            auth_service(),
            request.form.get("name", ""),
            request.form.get("email", ""),
            request.form.get("password", ""),
            request.form.get("confirm_password", ""),
        )
    except FormError as e:
        return render_template(
            "signup.html", errors={e.field: e.message}, form=request.form
        )

    save_auth_session(auth_session)
    flash("OTP sent to your email!", "info")
    return redirect(url_for("verify"))


@app.route("/verify", methods=["GET", "POST"])
def verify():
    auth_session = get_auth_session()
    if auth_session.pending_signup is None:
        return redirect(url_for("signup"))

    if request.method == "GET":
        return render_template("verify.html", errors={})

    # The form has one input per digit
    code = "".join(request.form.getlist("otp"))
    try:
        user = auth.verify_otp(auth_session, auth_service(), code)
    except FormError as e:
        return render_template("verify.html", errors={e.field: e.message})
    except AuthError as e:
        return render_template("verify.html", errors={"otp": str(e)})

    save_auth_session(auth_session)
    LOG.info("User %s signed up", user["id"])
    flash("Account created successfully!", "success")
    return redirect(url_for("dashboard"))


@app.route("/verify/resend", methods=["POST"])
def resend_otp():
    auth_session = get_auth_session()
    if auth.resend_otp(auth_session, auth_service()):
        save_auth_session(auth_session)
        flash("New OTP sent!", "info")
    return redirect(url_for("verify"))


@app.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "GET":
        return render_template("login.html", errors={}, form={})

    auth_session = get_auth_session()
    try:
        auth.login(
            auth_session,
            auth_service(),
            request.form.get("email", ""),
            request.form.get("password", ""),
        )
    except FormError as e:
        return render_template(
            "login.html", errors={e.field: e.message}, form=request.form
        )
    except AuthError as e:
        return render_template(
            "login.html", errors={"password": str(e)}, form=request.form
        )

    save_auth_session(auth_session)
    flash("Login successful!", "success")
    return redirect(url_for("dashboard"))


@app.route("/logout", methods=["POST"])
def logout():
    auth_session = get_auth_session()
    auth.logout(auth_session)
    save_auth_session(auth_session)
    flash("Logged out successfully!", "info")
    return redirect(url_for("index"))


# =============================================================================
# Children
# =============================================================================


@app.route("/dashboard")
@login_required
def dashboard():
    """The user's children with their next due vaccine."""
    user = get_auth_session().user
    today = date.today()
    children = []
    for child in load_store(store_path()).children_for(user["id"]):
        children.append({
            "child": child,
            "age": child.age_label(today),
            "next_due": child.next_due(today, app.config["DUE_SOON_DAYS"]),
        })
    return render_template("dashboard.html", children=children, today=today.isoformat())


@app.route("/children", methods=["POST"])
@login_required
def add_child():
    """Handle the child profile form."""
    user = get_auth_session().user
    name = (request.form.get("name") or "").strip()
    gender = request.form.get("gender") or None
    blood_group = request.form.get("blood_group") or None

    if not name:
        flash("Child name is required", "error")
        return redirect(url_for("dashboard"))

    today = date.today()
    try:
        dob = validate_birth_date(request.form.get("dob", ""), today=today)
    except InvalidDate as e:
        flash(str(e), "error")
        return redirect(url_for("dashboard"))

    child = ChildProfile.create(user["id"], name, dob.isoformat(), gender, blood_group)
    save_child_profile(store_path(), child)
    schedule_reminders(
        child.schedule, today, app.config["REMINDER_DAYS"], child_name=child.name
    )

    flash("Child profile added successfully!", "success")
    return redirect(url_for("child_detail", child_id=child.id))


def _own_child_or_none(child_id: int):
    user = get_auth_session().user
    child = load_store(store_path()).get_child(child_id)
    if child is None or child.user_id != user["id"]:
        return None
    return child


@app.route("/children/<int:child_id>")
@login_required
def child_detail(child_id: int):
    """Child detail page with the schedule and statuses."""
    child = _own_child_or_none(child_id)
    if child is None:
        flash(f"Child '{child_id}' not found", "error")
        return redirect(url_for("dashboard"))

    today = date.today()
    all_status = child.get_all_event_status(today, app.config["DUE_SOON_DAYS"])
    status_counts = {
        "overdue": sum(1 for s in all_status if s.status == Status.OVERDUE),
        "due_soon": sum(1 for s in all_status if s.status == Status.DUE_SOON),
        "upcoming": sum(1 for s in all_status if s.status == Status.UPCOMING),
        "completed": sum(1 for s in all_status if s.status == Status.COMPLETED),
    }
    return render_template(
        "child.html",
        child=child,
        age=child.age_label(today),
        all_status=all_status,
        status_counts=status_counts,
        Status=Status,
    )


@app.route("/children/<int:child_id>/events/<int:index>/complete", methods=["POST"])
@login_required
def complete_event(child_id: int, index: int):
    """Mark a dose as given, or undo with completed=false."""
    child = _own_child_or_none(child_id)
    if child is None:
        flash(f"Child '{child_id}' not found", "error")
        return redirect(url_for("dashboard"))

    completed = request.form.get("completed", "true").lower() != "false"
    try:
        event = child.get_event(index)
    except IndexError as e:
        flash(str(e), "error")
        return redirect(url_for("child_detail", child_id=child_id))

    set_event_completed(store_path(), child_id, index, completed)
    verb = "given" if completed else "not given"
    flash(f"Marked {event.name} as {verb}", "success")
    return redirect(url_for("child_detail", child_id=child_id))


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
