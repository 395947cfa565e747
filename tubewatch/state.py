import re
import sqlite3
from pathlib import Path

from tubewatch.models import Video

MYSQL_DSN_RE = re.compile(
    r"^(?:(?P<user>[^:@]*)(?::(?P<password>[^@]*))?@)?"
    r"(?:tcp\()?(?P<host>[^:/()]*)(?::(?P<port>\d+))?\)?"
    r"/(?P<database>[^?]+)$"
)


def parse_mysql_dsn(dsn: str) -> dict:
    """Accepts `user:password@host:port/database` (also `user:password@tcp(host:port)/database`)."""
    m = MYSQL_DSN_RE.match(dsn.strip())
    if not m:
        raise ValueError(f"无法解析 MySQL DSN: {dsn}")
    params = {
        "user": m.group("user") or "root",
        "password": m.group("password") or "",
        "host": m.group("host") or "127.0.0.1",
        "port": int(m.group("port") or 3306),
        "database": m.group("database"),
        "charset": "utf8mb4",
    }
    return params


class VideoRepository:
    def __init__(self, driver: str = "sqlite3", dsn: str = "data/youtube.db"):
        if driver not in ("sqlite3", "mysql"):
            raise ValueError(f"不支持的数据库驱动: {driver}")
        self.driver = driver
        self.dsn = dsn
        self.conn = None
        self.placeholder = "?" if driver == "sqlite3" else "%s"

    def _connect(self):
        if self.conn is not None:
            return self.conn
        if self.driver == "sqlite3":
            Path(self.dsn).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(self.dsn, check_same_thread=False)
        else:
            import pymysql

            self.conn = pymysql.connect(**parse_mysql_dsn(self.dsn))
        return self.conn

    def _sql(self, statement: str) -> str:
        return statement.replace("?", self.placeholder)

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def migrate(self):
        conn = self._connect()
        cur = conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS video (
            ID CHAR(32) NOT NULL PRIMARY KEY,
            ChannelID CHAR(32) NOT NULL,
            Title VARCHAR(256) NOT NULL,
            Published CHAR(32)
        )
        """)
        conn.commit()

    def has_video(self, video_id: str) -> bool:
        cur = self._connect().cursor()
        cur.execute(self._sql("SELECT ID FROM video WHERE ID = ?"), (video_id,))
        return cur.fetchone() is not None

    def add_video(self, video: Video):
        conn = self._connect()
        cur = conn.cursor()
        cur.execute(
            self._sql("INSERT INTO video(ID, ChannelID, Title, Published) VALUES (?, ?, ?, ?)"),
            (video.id, video.channel_id, video.title, video.published),
        )
        conn.commit()

    def count(self) -> int:
        cur = self._connect().cursor()
        cur.execute("SELECT COUNT(*) FROM video")
        return cur.fetchone()[0]
