import unittest
from unittest.mock import patch

from sqlalchemy import create_engine, delete
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quotes_api.domain.errors import Conflict, InvalidInput, NotFound, StorageFailure
from quotes_api.models.quote import Quote
from quotes_api.repositories.quotes import QuoteStorage


class QuoteStorageTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autocommit=False, autoflush=False)
        Quote.__table__.create(bind=cls.engine)

    @classmethod
    def tearDownClass(cls):
        Quote.__table__.drop(bind=cls.engine)
        cls.engine.dispose()

    def setUp(self):
        self.db = self.SessionLocal()
        self.db.execute(delete(Quote))
        self.db.commit()
        self.storage = QuoteStorage(self.db)

    def tearDown(self):
        self.db.close()

    def _seed_ids(self, *ids: int) -> None:
        for quote_id in ids:
            self.db.add(Quote(id=quote_id, author="Seed", text=f"seed {quote_id}"))
        self.db.commit()

    def test_next_free_id_on_empty_table_is_one(self):
        self.assertEqual(self.storage.next_free_id(), 1)

    def test_next_free_id_after_contiguous_ids(self):
        self._seed_ids(1, 2, 3)
        self.assertEqual(self.storage.next_free_id(), 4)

    def test_next_free_id_fills_lowest_gap(self):
        self._seed_ids(1, 2, 4, 5, 7)
        self.assertEqual(self.storage.next_free_id(), 3)

    def test_next_free_id_prefers_one_when_free(self):
        self._seed_ids(2, 3)
        self.assertEqual(self.storage.next_free_id(), 1)

    def test_create_assigns_id_and_timestamp(self):
        row = self.storage.create("Confucius", "Life is simple")
        self.assertEqual(row.id, 1)
        self.assertEqual(row.author, "Confucius")
        self.assertEqual(row.text, "Life is simple")
        self.assertIsNotNone(row.created_at)

        second = self.storage.create("Plato", "Know thyself")
        self.assertEqual(second.id, 2)

    def test_create_conflict_when_id_taken_concurrently(self):
        self._seed_ids(1)
        with self.SessionLocal() as other:
            storage = QuoteStorage(other)
            with patch.object(QuoteStorage, "next_free_id", return_value=1):
                with self.assertRaises(Conflict) as ctx:
                    storage.create("Plato", "Know thyself")
        self.assertEqual(str(ctx.exception), "ID 1 already exists")
        self.assertEqual(ctx.exception.quote_id, 1)
        self.assertIsInstance(ctx.exception, StorageFailure)
        self.assertEqual(self.db.query(Quote).count(), 1)

    def test_create_rejects_empty_input(self):
        with self.assertRaises(InvalidInput):
            self.storage.create("", "text")
        with self.assertRaises(InvalidInput):
            self.storage.create("author", "")

    def test_list_all_orders_by_id(self):
        self._seed_ids(3, 1, 2)
        self.assertEqual([q.id for q in self.storage.list_all()], [1, 2, 3])

    def test_list_all_empty(self):
        self.assertEqual(self.storage.list_all(), [])

    def test_list_by_author(self):
        self.storage.create("Confucius", "Life is simple")
        self.storage.create("Plato", "Know thyself")
        self.storage.create("Confucius", "Everything has beauty")
        rows = self.storage.list_by_author("Confucius")
        self.assertEqual([q.id for q in rows], [1, 3])
        self.assertEqual(self.storage.list_by_author("Aristotle"), [])

    def test_get_random(self):
        with self.assertRaises(NotFound):
            self.storage.get_random()
        self.storage.create("Confucius", "Life is simple")
        self.assertEqual(self.storage.get_random().author, "Confucius")

    def test_delete(self):
        self.storage.create("Confucius", "Life is simple")
        self.storage.delete(1)
        self.assertEqual(self.storage.list_all(), [])
        with self.assertRaises(NotFound):
            self.storage.delete(1)

    def test_delete_frees_id_for_reuse(self):
        self.storage.create("A", "one")
        self.storage.create("B", "two")
        self.storage.delete(1)
        self.assertEqual(self.storage.create("C", "three").id, 1)

    def test_exists_is_false_after_delete(self):
        row = self.storage.create("Confucius", "Life is simple")
        self.assertTrue(self.storage.exists("Confucius", "Life is simple"))
        self.storage.delete(row.id)
        self.assertFalse(self.storage.exists("Confucius", "Life is simple"))

    def test_exists_is_exact_match(self):
        self.storage.create("Confucius", "Life is simple")
        self.assertTrue(self.storage.exists("Confucius", "Life is simple"))
        self.assertFalse(self.storage.exists("confucius", "Life is simple"))
        self.assertFalse(self.storage.exists("Confucius", "Life is simple "))
        self.assertFalse(self.storage.exists("Plato", "Life is simple"))

    def test_backend_error_is_wrapped(self):
        error = OperationalError("SELECT", {}, Exception("connection lost"))
        with patch.object(self.db, "scalars", side_effect=error):
            with self.assertRaises(StorageFailure) as ctx:
                self.storage.list_all()
        self.assertEqual(ctx.exception.operation, "list_all")
        self.assertIs(ctx.exception.cause, error)
