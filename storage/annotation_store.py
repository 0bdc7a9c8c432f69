"""Primary annotation store client (MySQL protocol)"""

import json
import threading
from typing import Any, Dict, List, Optional

import pymysql
from pymysql.constants import CLIENT
from pymysql.cursors import DictCursor

from annotation.errors import ConflictError, CorruptRecord, StoreUnavailable, ValidationError
from annotation.tokens import AnnotationToken
from config.database_config import DatabaseConfig
from storage.models import AnnotationDocument
from utils.time_utils import as_utc, to_naive_utc

# MySQL error code for a duplicate key
ER_DUP_ENTRY = 1062


class AnnotationStore:
    """
    Client for the `annotations` table.

    One instance is owned by the web process and shared by request handlers;
    the connection is opened on first use and every operation holds a lock.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """Create the client; no connection is made until the first query"""
        if config is None:
            config = DatabaseConfig()
        self.config = config
        self.table = config.TABLE
        self.connection = None
        self._lock = threading.RLock()

    def _connect(self):
        """Open the connection"""
        try:
            self.connection = pymysql.connect(
                host=self.config.HOST,
                port=self.config.PORT,
                database=self.config.DATABASE,
                user=self.config.USER,
                password=self.config.PASSWORD,
                connect_timeout=self.config.CONNECT_TIMEOUT,
                charset='utf8mb4',
                cursorclass=DictCursor,
                # UPDATE rowcount reports matched rows, not only changed ones
                client_flag=CLIENT.FOUND_ROWS,
                autocommit=False
            )
        except pymysql.MySQLError as e:
            self.connection = None
            raise StoreUnavailable(f"cannot connect to annotation store: {e}") from e

    def _ensure_connected(self):
        """Make sure a live connection is available"""
        if self.connection is None:
            self._connect()
            return
        try:
            self.connection.ping(reconnect=True)
        except pymysql.MySQLError:
            self._connect()

    @staticmethod
    def _row_to_document(row: Dict[str, Any]) -> AnnotationDocument:
        """Decode a stored row; undecodable content raises CorruptRecord"""
        filename = row.get('filename')
        try:
            annotations = row.get('annotations') or '[]'
            meta = row.get('meta') or '{}'
            if isinstance(annotations, (str, bytes)):
                annotations = json.loads(annotations)
            if isinstance(meta, (str, bytes)):
                meta = json.loads(meta)
            if not isinstance(annotations, list) or not isinstance(meta, dict):
                raise ValidationError("annotations must be a list and meta an object")
            return AnnotationDocument(
                filename=filename,
                annotations=[AnnotationToken.from_dict(a) for a in annotations],
                meta=meta,
                created_at=as_utc(row.get('created_at')),
                updated_at=as_utc(row.get('updated_at')),
            )
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            raise CorruptRecord(f"stored annotations for {filename} cannot be decoded: {e}") from e

    @staticmethod
    def _encode_annotations(document: AnnotationDocument) -> str:
        return json.dumps([a.to_dict() for a in document.annotations], ensure_ascii=False)

    def find_by_filename(self, filename: str) -> Optional[AnnotationDocument]:
        """Fetch the document for a filename, None if absent"""
        sql = f"""
            SELECT filename, annotations, meta, created_at, updated_at
            FROM `{self.table}`
            WHERE filename = %s
        """

        with self._lock:
            self._ensure_connected()
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(sql, (filename,))
                    row = cursor.fetchone()
                # end the implicit read transaction so later reads see new commits
                self.connection.commit()
            except pymysql.MySQLError as e:
                raise StoreUnavailable(f"annotation lookup failed: {e}") from e
        return self._row_to_document(row) if row else None

    def insert_document(self, document: AnnotationDocument) -> None:
        """
        Insert a new document

        Raises:
            ConflictError: a document with the same filename already exists
            StoreUnavailable: the write failed
        """
        sql = f"""
            INSERT INTO `{self.table}` (filename, annotations, meta, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s)
        """

        with self._lock:
            self._ensure_connected()
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(
                        sql,
                        (
                            document.filename,
                            self._encode_annotations(document),
                            json.dumps(document.meta, ensure_ascii=False),
                            to_naive_utc(document.created_at),
                            to_naive_utc(document.updated_at),
                        )
                    )
                self.connection.commit()
            except pymysql.err.IntegrityError as e:
                self.connection.rollback()
                if e.args and e.args[0] == ER_DUP_ENTRY:
                    raise ConflictError(document.filename) from e
                raise StoreUnavailable(f"annotation insert failed: {e}") from e
            except pymysql.MySQLError as e:
                self.connection.rollback()
                raise StoreUnavailable(f"annotation insert failed: {e}") from e

    def replace_document(self, document: AnnotationDocument) -> None:
        """Overwrite annotations, meta and updated_at; created_at is left as stored"""
        sql = f"""
            UPDATE `{self.table}`
            SET annotations = %s, meta = %s, updated_at = %s
            WHERE filename = %s
        """

        with self._lock:
            self._ensure_connected()
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(
                        sql,
                        (
                            self._encode_annotations(document),
                            json.dumps(document.meta, ensure_ascii=False),
                            to_naive_utc(document.updated_at),
                            document.filename,
                        )
                    )
                    updated = cursor.rowcount
                if updated == 0:
                    self.connection.rollback()
                    raise StoreUnavailable(
                        f"annotation update failed: no stored document for {document.filename}"
                    )
                self.connection.commit()
            except pymysql.MySQLError as e:
                self.connection.rollback()
                raise StoreUnavailable(f"annotation update failed: {e}") from e

    def list_documents(self) -> List[AnnotationDocument]:
        """All documents, oldest first"""
        sql = f"""
            SELECT filename, annotations, meta, created_at, updated_at
            FROM `{self.table}`
            ORDER BY created_at, filename
        """

        with self._lock:
            self._ensure_connected()
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(sql)
                    rows = cursor.fetchall()
                self.connection.commit()
            except pymysql.MySQLError as e:
                raise StoreUnavailable(f"annotation listing failed: {e}") from e
        return [self._row_to_document(row) for row in rows]

    def close(self):
        """Close the connection"""
        with self._lock:
            if self.connection:
                self.connection.close()
                self.connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
