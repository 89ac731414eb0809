# bilisync

`bilisync` is a library of building blocks for a bilibili synchronisation
job. It tracks which videos and pages have been fetched, lays files out on
disk with safe, templated names, writes NFO metadata for media servers such
as Kodi, Jellyfin and Emby, keeps its state in SQLite, and downloads files
and merges split streams with `ffmpeg`.

## Installation

```
pip install .
pip install ".[test]"   # pytest, pytest-asyncio and responses for the test suite
```

The only runtime dependency is `requests`. `Downloader.merge` runs
`ffmpeg`, which must be on `PATH`.

## Modules

| Module | Contents |
| --- | --- |
| `bilisync.filenamify` | `filenamify(text)` turns arbitrary titles into safe file names. |
| `bilisync.status` | `Status`, `VideoStatus` and `PageStatus` pack per-task retry counters into one integer. |
| `bilisync.errors` | `DownloadAbortError` (rate limiting hit) and `ProcessPageError` (a page did not finish). |
| `bilisync.entities` | `Video`, `Page`, `Favorite`, `Collection`, `Submission` and `WatchLater` records; `Video.from_row` and `Page.from_row` build them from database rows. |
| `bilisync.config_items` | `FixedDelay`, `RandomDelay`, `parse_delay`, `delay_to_value`, `DelayConfig`, `ConcurrentLimit`, `WatchLaterConfig` and `NFOTimeType`. |
| `bilisync.template` | `PathSafeTemplate` renders `{{title}}`-style name templates, keeping the path separators written in the template; `truncate` and `default_template`. |
| `bilisync.utils` | `init_logger`, `id_time_key` and the asynchronous `delay`. |
| `bilisync.nfo` | `NFOSerializer` and `NFOMode` write movie, tvshow, episode and person NFO documents. |
| `bilisync.migrations` | `Migration`, `MIGRATIONS`, `apply_migrations`, `rollback_migrations`, `applied_migrations`. |
| `bilisync.database` | `database_path`, `database_connection` and `migrate_database`. |
| `bilisync.store` | `update_videos_status` and `update_pages_status`. |
| `bilisync.downloader` | `Downloader.fetch` streams a URL to disk; `Downloader.merge` joins video and audio with `ffmpeg`. |

## Safe file names

```python
from bilisync.filenamify import filenamify

filenamify("foo/bar")         # "foo_bar"
filenamify("../../foo/bar")   # "__.._foo_bar"
filenamify("con")             # "con_"
```

Runs of reserved characters collapse into one `_`, leading and trailing
periods are replaced, and names reserved on Windows get a trailing `_`.

## Name templates

Templates use `{{field}}` placeholders, dotted paths and registered helpers;
`default_template(video_name, page_name)` registers the `truncate` helper and
the templates `"video"` and `"page"`. Separators written in the template
survive rendering, while any separator coming from the data is replaced
together with every other unsafe character:

```python
from bilisync.template import default_template

template = default_template("{{title}}", "{{bvid}}")
template.register("short", "{{ truncate title 7 }}/extra")
template.render("short", {"title": "关注/永雏塔菲喵"})   # "关注_永雏塔菲/extra" on POSIX
```

Block expressions (`{{#if}}`, `{{#each}}`, partials) are not supported and
raise `TemplateError`, as do unknown helpers and unknown template names.

## Download status

Each video tracks five tasks (poster, video NFO, uploader face, uploader NFO,
pages) and each page four (poster, video, NFO, danmaku). Every task gets
three bits: each failure counts up to four attempts, success sets all three
bits, and once nothing is left to try the top bit marks the record as
handled. Outcomes are passed as a sequence in which an exception instance
means failure, as `asyncio.gather(..., return_exceptions=True)` returns them.

```python
from bilisync.status import Status, VideoStatus

status = VideoStatus(0)
status.should_run()                      # [True, True, True, True, True]
status.update_status([None] * 5)         # every task succeeded
int(status) >= Status.handled()          # True
```

A wrong number of outcomes raises `ValueError`.

## NFO files

```python
from bilisync.config_items import NFOTimeType
from bilisync.entities import Video
from bilisync.nfo import NFOMode, NFOSerializer

video = Video(name="name", bvid="bvid", intro="intro", upper_id=1, upper_name="upper")
xml = NFOSerializer(video, NFOMode.MOVIE).generate_nfo(NFOTimeType.PUB_TIME)
```

`MOVIE`, `TVSHOW` and `UPPER` take a `Video`; `EPISODE` takes a `Page`.
Any other pairing raises `ValueError`.

## Delays and logging

`parse_delay` accepts either a number of milliseconds or
`{"min": ..., "max": ...}`; `await delay(...)` sleeps for the fixed time or a
random time in that inclusive range, and does nothing for `None`.
`DelayConfig.is_valid()` is false when a random delay's minimum is not below
its maximum.

`init_logger("warn,bilisync=info")` sets up a stream handler: a bare level
sets the default, `name=level` sets one logger, a bare name enables that
logger fully, and anything else is ignored.

## State database

The state lives in `data.sqlite` inside the configuration directory (by
default `bili-sync` under the platform's configuration directory, for
example `~/.config/bili-sync` on Linux).

```python
from pathlib import Path
from bilisync.database import database_connection, migrate_database

config_dir = Path("~/.config/bili-sync").expanduser()
migrate_database(config_dir)               # applies pending migrations
connection = database_connection(config_dir)
```

`database_connection` only opens the file (creating it and its directory if
needed) with `sqlite3.Row` rows; it does not migrate. Migrations run in
order, each in its own transaction, and are recorded in the
`seaql_migrations` table; `rollback_migrations(connection, steps)` reverts
the newest ones. They use `ALTER TABLE ... DROP COLUMN`, which needs SQLite
3.35 or later.

`update_videos_status` and `update_pages_status` insert records whose `id`
is new and, for existing ones, update only the download status (and, for
pages, the file path).

## Downloads

`Downloader(session)` streams each URL into a file, creating parent
directories. Pass a `requests.Session` carrying the headers the server
expects; without one a plain session is used. The response status is not
checked. `merge` raises `MergeError` with `ffmpeg`'s error output when it
fails.

## What is not included

There is no command to run and no scheduling loop. The package does not
talk to the bilibili API: it does not list favourites, collections,
watch-later or submissions, fetch video details, choose streams, sign
requests or refresh credentials, and it does not read or write a
configuration file. Those parts are left to the program that uses these
pieces.