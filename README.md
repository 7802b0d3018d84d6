# clubdesk

`clubdesk` holds the request-handling logic for a programming club's back
office. An admin approves, rejects or bans members. Admins publish
announcements and contests. Admins and managers run events and the
three-person teams that take part in them.

The package uses only the standard library. Data is kept in SQLite.

## Installing

Install the package with pip from a checkout of this project. The `test`
extra also installs pytest.

## Opening a database

```python
from clubdesk.database import connect, init_schema

conn = connect("club.db")   # ":memory:" works too
init_schema(conn)
```

`connect` takes one of these forms:

- a plain file path;
- a `sqlite:///path` URL;
- nothing at all, in which case it reads the `DATABASE_URL` environment variable.

It raises `RuntimeError` in these cases:

- no URL is available;
- the URL has any scheme other than `sqlite`;
- the database cannot be opened.

Rows come back as `sqlite3.Row`, and foreign keys are switched on.

`init_schema` creates these tables if they are missing: `users`,
`announcements`, `contests`, `events`, `teams`, `team_members` and
`otp_codes`.

## Who is calling

Every handler takes the caller's `Claims` (from `clubdesk.errors`). A
`Claims` object holds `user_id`, `is_admin` and `is_manager`.

- `require_admin(claims)` raises `Forbidden` unless the caller is an admin.
- `require_admin_or_manager(claims)` also lets managers through.

```python
from clubdesk.errors import Claims

admin = Claims(user_id=1, is_admin=True, is_manager=False)
```

## Handlers

Each handler returns a JSON-ready dict with `"success": True`. List
handlers also include a `"count"`. The creating handlers are
`create_announcement`, `create_contest`, `create_event` and `add_team`.
They return a pair `(201, body)` instead of a bare dict.

| Module                    | Handlers |
|---------------------------|----------|
| `clubdesk.users`          | `get_me`, `update_me` |
| `clubdesk.admin`          | `admin_list_users`, `admin_get_user`, `admin_approve_user`, `admin_reject_user`, `admin_ban_user` |
| `clubdesk.announcements`  | `get_announcements`, `get_announcement`, `create_announcement`, `update_announcement`, `delete_announcement` |
| `clubdesk.contests`       | `get_contests`, `get_contest`, `create_contest`, `update_contest`, `delete_contest` |
| `clubdesk.events`         | `get_events`, `get_event`, `create_event`, `update_event`, `delete_event`, `add_team`, `update_team`, `delete_team` |
| `clubdesk.health`         | `health_check` |

Request bodies can be passed in two forms:

- plain dicts, which are checked by the `from_dict` classmethods in `clubdesk.models`;
- the matching dataclasses, such as `CreateContest` or `TeamInput`.

```python
from clubdesk.contests import create_contest, get_contests

status, body = create_contest(conn, admin, {
    "title": "Weekly Round 12",
    "contest_link": "https://contests.example.com/round-12",
    "contest_date": "2024-05-01T18:00:00",
})
assert status == 201
print(get_contests(conn, admin)["count"])
```

### Rules the handlers enforce

- **Permissions:** editing announcements and contests needs an admin. Editing events and teams needs an admin or a manager. Reading is open to any caller.
- **Dates:** dates are exchanged as `YYYY-MM-DDTHH:MM:SS`.
  - For announcements and contests, a date that does not parse is stored as empty.
  - For events, a date that does not parse raises `BadRequest`.
- **Lengths:** titles may be 1–255 characters. Announcement content and event descriptions may be 1–10000 characters. Registration numbers may be 1–50 characters.
- **Contest links:** a contest link must start with `http://` or `https://`.
- **Teams:** a team must list exactly three registration numbers. `update_team` replaces all of a team's members.
- **Events:** `get_events` and `get_event` attach each event's teams and members. A member's `user_id` and `name` are filled in when a user has the same registration number.
- **Approval:** only pending users can be approved or rejected.
- **Bans:** an admin cannot ban themselves, and a user who is already rejected cannot be banned.
- **Reasons:** `admin_reject_user` and `admin_ban_user` take an optional `reason`, which is included in the message.
- **Health:** `health_check` reports `{"status": "ok", "database": "connected"}`, or `"error"`/`"disconnected"` when the query fails.

`clubdesk.validation` offers `validate_string`, `validate_email` and
`validate_url`. Each raises `BadRequest` on bad input.

## Errors

Failures are raised as subclasses of `AppError`. Each subclass maps to an
HTTP status:

| Error           | Status |
|-----------------|--------|
| `BadRequest`    | 400 |
| `Unauthorized`  | 401 |
| `Forbidden`     | 403 |
| `NotFound`      | 404 |
| `Conflict`      | 409 |
| `InternalError` | 500 |

`AppError.to_response()` returns `(status, {"success": False, "error": message})`.
Database failures inside handlers are raised as `InternalError`.

## Routing

`clubdesk.routes.dispatch(conn, claims, method, path, body=None)` sends a
method and an `/api/...` path to the matching handler. It always returns a
pair `(status, body)`.

It serves these paths:

- `/api/health`
- `/api/users/me`
- `/api/admin/users...`
- `/api/announcements...`
- `/api/contests...`
- `/api/events...`

The query string is read too, for example `?status=pending` on
`/api/admin/users`.

| Situation | Result |
|-----------|--------|
| Unknown path | `(404, None)` |
| Known path, wrong method | `(405, None)` |
| `claims` is `None` on any path except `/api/health` | 401 |
| Path id that is not a 32-bit integer | 400 |
| Route needs a body and none is given | 400 |
| Any `AppError` | Turned into its response |

A body may be a JSON string, JSON bytes or an already-decoded object.

```python
from clubdesk.routes import dispatch

status, body = dispatch(conn, admin, "PUT", "/api/admin/users/7/approve")
```

## One-time codes

`clubdesk.otp` provides three functions:

- `generate_otp()` returns a random six-digit code.
- `store_otp(conn, email, code)` saves the code and invalidates earlier unused codes for that address. A code is valid for ten minutes.
- `verify_otp(conn, email, code)` accepts a matching, unused, unexpired code once. It returns whether the code was valid.

```python
from clubdesk.otp import generate_otp, store_otp, verify_otp

code = generate_otp()
store_otp(conn, "member@example.com", code)
assert verify_otp(conn, "member@example.com", code)
```

## What the package does not do

- **No HTTP server or command.** It does not listen on a port. You call `dispatch` or the handlers from your own server.
- **No sign-up, login or token handling.** There are no registration or login handlers, and `RegisterInput` and `LoginInput` are only parsed. Nothing hashes passwords, issues tokens or checks them. The caller must work out the `Claims` itself.
- **No e-mail.** One-time codes are generated and stored, but never sent.