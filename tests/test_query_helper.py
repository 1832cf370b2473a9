from types import SimpleNamespace
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlhelper import QueryHelper, ConnectionDescriptor
from sqlhelper.statement import Statement


class TestConnection:

    def test_lazy_connect_and_disconnect(self, db_path):
        db = QueryHelper("sqlite", db_name=db_path)
        assert not db.is_connected()
        db.query("SELECT 1")
        assert db.is_connected()
        db.disconnect()
        assert not db.is_connected()

    def test_connect_is_memoized(self, helper):
        assert helper.connect() is helper.connect()

    def test_reconnects_after_disconnect(self, people):
        people.disconnect()
        assert people.select("people", ["name"], {"age": 31}).fetch_value() == "ann"
        assert people.is_connected()

    def test_context_manager_disconnects(self, db_path):
        with QueryHelper.from_url(f"sqlite:///{db_path}") as db:
            db.query("SELECT 1")
            assert db.is_connected()
        assert not db.is_connected()

    def test_from_descriptor(self, db_path):
        db = QueryHelper.from_descriptor(ConnectionDescriptor("sqlite", database=db_path))
        assert db.dialect == "sqlite"
        assert db.query("SELECT 2").fetch_value() == 2
        db.disconnect()


class TestStatements:

    def test_insert_returns_last_id(self, helper):
        assert helper.insert("people", {"name": "ann", "age": 31}) == 1
        assert helper.insert("people", {"name": "bob", "age": 42}) == 2
        assert helper.get_query_string() == "INSERT INTO people (name,age) VALUES (?,?)"

    def test_update_returns_row_count(self, people):
        assert people.update("people", {"age": 50}, {"age": 42}) == 2
        assert people.get_query_string() == "UPDATE people SET age = ? WHERE age = ?"
        assert people.select("people", ["name"], {"age": 50}, order_by="name").fetch_all_value() == ["bob", "cid"]

    def test_update_without_where_needs_allow_full(self, people):
        with pytest.raises(ValueError):
            people.update("people", {"age": 1}, {})
        assert people.update("people", {"age": 1}, {}, allow_full=True) == 3

    def test_delete_returns_row_count(self, people):
        assert people.delete("people", {"name": "bob"}) == 1
        assert people.delete("people", {"name": "nobody"}) == 0
        assert people.delete("people", {}, allow_full=True) == 2

    def test_select_with_clauses(self, people):
        rows = people.select(
            "people", ["age", "COUNT(*) AS n"], {}, group_by="age",
            having="COUNT(*) > 1", order_by="age", limit=5
        ).fetch_all()
        assert rows == [{"age": 42, "n": 2}]

    def test_select_distinct(self, people):
        assert people.select("people", ["age"], {}, order_by="age", distinct=True).fetch_all_value() == [31, 42]

    def test_query_binds_positionally(self, people):
        people.query("SELECT name FROM people WHERE age = ? AND name <> ?", [42, "bob"])
        assert people.fetch_all_value() == ["cid"]

    def test_query_keeps_quoted_literals(self, helper):
        assert helper.query("SELECT 'a?b:c' AS s, ? AS v", [5]).fetch_assoc() == {"s": "a?b:c", "v": 5}

    def test_exec_does_not_replace_statement(self, people):
        people.select("people", ["name"], {"name": "ann"})
        people.exec("UPDATE people SET age = 0")
        assert people.get_query_string() == "SELECT name FROM people WHERE name = ?"

    def test_driver_errors_propagate(self, people):
        with pytest.raises(IntegrityError):
            people.insert("people", {"name": "ann", "age": 1})
        with pytest.raises(OperationalError):
            people.query("SELECT nope FROM people")

    def test_insert_on_duplicate_update_binds_values_twice(self, helper, monkeypatch):
        seen = []

        def fake_execute(stmt, conn):
            seen.append((stmt.sql, list(stmt.params)))
            stmt.result = SimpleNamespace(lastrowid=9)
            return stmt

        monkeypatch.setattr(Statement, "execute", fake_execute)
        assert helper.insert_on_duplicate_update("t", {"x": 1}) == 9
        assert seen == [("INSERT INTO t (x) VALUES (?) ON DUPLICATE KEY UPDATE x = ?", [1, 1])]


class TestFetch:

    def test_fetch_before_any_statement(self, helper):
        with pytest.raises(RuntimeError, match="No statement"):
            helper.fetch_all()

    def test_fetch_assoc_walks_rows(self, people):
        people.select("people", ["name", "age"], {"age": 42}, order_by="name")
        assert people.fetch_assoc() == {"name": "bob", "age": 42}
        assert people.fetch_assoc() == {"name": "cid", "age": 42}
        assert people.fetch_assoc() is None

    def test_fetch_all_and_name(self, people):
        expected = [{"name": "ann"}, {"name": "bob"}, {"name": "cid"}]
        assert people.select("people", ["name"], {}, order_by="id").fetch_all() == expected
        assert people.select("people", ["name"], {}, order_by="id").fetch_all_name() == expected

    def test_fetch_num(self, people):
        people.select("people", ["name", "age"], {}, order_by="id")
        assert people.fetch_num() == ("ann", 31)
        assert people.fetch_all_num() == [("bob", 42), ("cid", 42)]
        assert people.fetch_num() is None

    def test_fetch_all_assoc_keys_by_first_column(self, people):
        out = people.select("people", ["name", "age"], {}).fetch_all_assoc()
        assert out == {
            "ann": {"name": "ann", "age": 31},
            "bob": {"name": "bob", "age": 42},
            "cid": {"name": "cid", "age": 42},
        }

    def test_fetch_all_assoc_duplicates(self, people):
        out = people.select("people", ["age", "name"], {}, order_by="id").fetch_all_assoc()
        assert out[42] == {"age": 42, "name": "cid"}
        assert len(out) == 2
        people.select("people", ["age", "name"], {}, order_by="id")
        with pytest.raises(ValueError, match="Duplicate"):
            people.fetch_all_assoc(on_conflict="raise")

    def test_fetch_value(self, people):
        people.select("people", ["COUNT(*)"], {"age": 42})
        assert people.fetch_value() == 2
        assert people.fetch_value() is None

    def test_fetch_df(self, people):
        df = people.select("people", ["name", "age"], {}, order_by="id").fetch_df()
        assert list(df.columns) == ["name", "age"]
        assert df["age"].tolist() == [31, 42, 42]

    def test_earlier_statement_stays_readable(self, people):
        first = people.select("people", ["name"], {"name": "ann"}).statement
        people.select("people", ["name"], {"name": "bob"})
        assert first.fetch_value() == "ann"
        assert people.fetch_value() == "bob"


class TestFetchWithoutRows:

    def test_fetch_after_insert_is_empty(self, helper):
        helper.insert("people", {"name": "ann", "age": 31})
        assert helper.fetch_assoc() is None
        assert helper.fetch_all() == []
        assert helper.fetch_all_name() == []
        assert helper.fetch_all_num() == []
        assert helper.fetch_num() is None
        assert helper.fetch_all_assoc() == {}
        assert helper.fetch_all_value() == []
        assert helper.fetch_value() is None
        assert helper.fetch_df().empty

    def test_fetch_after_update_and_delete_is_empty(self, people):
        people.update("people", {"age": 1}, {"name": "ann"})
        assert people.fetch_all() == []
        people.delete("people", {"name": "ann"})
        assert people.fetch_value() is None
