import sys
from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeConnection, make_column
from tables_to_go.database import DIALECTS, MSSQL, MySQL, PostgreSQL, create_database
from tables_to_go.database.base import Table
from tables_to_go.shared.errors import DatabaseConnectionError, QueryError, SettingsError
from tables_to_go.shared.settings import Settings
from tables_to_go.struct_codegen.tags import sql_tag

COLUMN_NAMES = [
    "ordinal_position",
    "column_name",
    "data_type",
    "column_default",
    "is_nullable",
    "character_maximum_length",
    "numeric_precision",
    "datetime_precision",
    "column_key",
    "extra",
    "constraint_name",
    "constraint_type",
]


class TestCreateDatabase:
    @pytest.mark.parametrize(
        "db_type,expected",
        [("pg", PostgreSQL), ("mysql", MySQL), ("mssql", MSSQL)],
    )
    def test_create_database(self, db_type, expected):
        database = create_database(Settings(db_type=db_type))
        assert isinstance(database, expected)
        assert database.name == db_type

    def test_create_database_unsupported(self):
        with pytest.raises(SettingsError):
            create_database(Settings(db_type="sqlite"))

    def test_registry(self):
        assert set(DIALECTS) == {"pg", "mysql", "mssql"}


class TestPostgreSQL:
    def test_defaults(self):
        database = PostgreSQL(Settings())
        assert database.schema == "public"
        kwargs = database.connect_kwargs()
        assert kwargs["port"] == 5432
        assert kwargs["user"] == "postgres"
        assert kwargs["dbname"] == "postgres"
        assert kwargs["host"] == "127.0.0.1"

    def test_explicit_settings(self):
        database = PostgreSQL(Settings(schema="sales", port=6543, user="app", password="pw"))
        assert database.schema == "sales"
        kwargs = database.connect_kwargs()
        assert kwargs["port"] == 6543
        assert kwargs["user"] == "app"
        assert kwargs["password"] == "pw"

    def test_list_tables(self):
        conn = FakeConnection((["table_name"], [("orders",), ("users",)]))
        database = PostgreSQL(Settings(schema="sales"), conn)

        tables = database.list_tables()

        assert [t.name for t in tables] == ["orders", "users"]
        assert not any(t.is_view for t in tables)
        query, params = conn.executed[0]
        assert "information_schema.tables" in query
        assert "BASE TABLE" in query
        assert params == ("sales",)

    def test_list_views(self):
        conn = FakeConnection((["table_name"], [("active_users",)]))
        database = PostgreSQL(Settings(), conn)

        views = database.list_views()

        assert [v.name for v in views] == ["active_users"]
        assert views[0].is_view
        assert "information_schema.views" in conn.executed[0][0]

    def test_list_columns(self):
        conn = FakeConnection(
            (
                COLUMN_NAMES,
                [
                    (1, "id", "integer", "nextval('users_id_seq'::regclass)", "NO", None, 32, None, None, None, "users_pkey", "PRIMARY KEY"),
                    (2, "email", "character varying", None, "YES", 255, None, None, None, None, None, None),
                ],
            )
        )
        database = PostgreSQL(Settings(), conn)
        table = Table("users")

        database.list_columns(table)

        assert [c.column_name for c in table.columns] == ["id", "email"]
        assert conn.executed[0][1] == ("users", "public")
        id_column, email_column = table.columns
        assert database.is_primary_key(id_column)
        assert database.is_auto_increment(id_column)
        assert database.is_integer(id_column)
        assert not database.is_primary_key(email_column)
        assert not database.is_auto_increment(email_column)
        assert database.is_string(email_column)

    def test_list_columns_error_names_table(self):
        conn = FakeConnection()
        conn.error = RuntimeError("permission denied")
        database = PostgreSQL(Settings(), conn)

        with pytest.raises(QueryError) as exc_info:
            database.list_columns(Table("secrets"))

        assert exc_info.value.table == "secrets"
        assert exc_info.value.dialect == "pg"

    @pytest.mark.parametrize(
        "data_type,predicate",
        [
            ("character varying", "is_string"),
            ("char", "is_string"),
            ("text", "is_text"),
            ("bigserial", "is_integer"),
            ("double precision", "is_float"),
            ("timestamp with time zone", "is_temporal"),
            ("date", "is_temporal"),
            ("boolean", "is_boolean"),
        ],
    )
    def test_predicates(self, data_type, predicate):
        database = PostgreSQL(Settings())
        assert getattr(database, predicate)(make_column("c", data_type))

    def test_unknown_type_matches_nothing(self):
        database = PostgreSQL(Settings())
        column = make_column("c", "jsonb")
        for predicate in ("is_string", "is_text", "is_integer", "is_float", "is_temporal", "is_boolean"):
            assert not getattr(database, predicate)(column)

    def test_connect_uses_psycopg2(self):
        fake_conn = MagicMock()
        fake_driver = MagicMock()
        fake_driver.connect.return_value = fake_conn
        database = PostgreSQL(Settings(db_name="app"))

        with patch.dict(sys.modules, {"psycopg2": fake_driver}):
            database.connect()

        fake_driver.connect.assert_called_once_with(**database.connect_kwargs())
        fake_conn.set_session.assert_called_once_with(readonly=True, autocommit=True)

        database.close()
        fake_conn.close.assert_called_once()

    def test_connect_failure(self):
        fake_driver = MagicMock()
        fake_driver.connect.side_effect = Exception("could not connect to server")
        database = PostgreSQL(Settings())

        with patch.dict(sys.modules, {"psycopg2": fake_driver}):
            with pytest.raises(DatabaseConnectionError) as exc_info:
                database.connect()

        assert exc_info.value.dialect == "pg"
        assert "could not connect to server" in str(exc_info.value)


class TestMySQL:
    def test_defaults(self):
        database = MySQL(Settings(db_type="mysql", db_name="shop"))
        assert database.schema == "shop"
        kwargs = database.connect_kwargs()
        assert kwargs["port"] == 3306
        assert kwargs["user"] == "root"
        assert kwargs["database"] == "shop"

    def test_list_tables_filters_on_database_name(self):
        conn = FakeConnection((["TABLE_NAME"], [("orders",)]))
        database = MySQL(Settings(db_type="mysql", db_name="shop"), conn)

        tables = database.list_tables()

        assert [t.name for t in tables] == ["orders"]
        assert conn.executed[0][1] == ("shop",)

    def test_list_columns(self):
        conn = FakeConnection(
            (
                [name.upper() for name in COLUMN_NAMES[:10]],
                [
                    (1, "id", "int", None, "NO", None, 10, None, "PRI", "auto_increment"),
                    (2, "sku", "varchar", None, "NO", 64, None, None, "UNI", ""),
                    (3, "created", "datetime", None, "YES", None, None, 0, "", ""),
                ],
            )
        )
        database = MySQL(Settings(db_type="mysql", db_name="shop"), conn)
        table = Table("products")

        database.list_columns(table)

        assert [c.column_name for c in table.columns] == ["id", "sku", "created"]
        assert conn.executed[0][1] == ("products", "shop")
        id_column, sku_column, created_column = table.columns
        assert database.is_primary_key(id_column)
        assert database.is_auto_increment(id_column)
        assert not database.is_primary_key(sku_column)
        assert database.is_string(sku_column)
        assert database.is_temporal(created_column)

    @pytest.mark.parametrize(
        "data_type,predicate",
        [
            ("varbinary", "is_string"),
            ("longtext", "is_text"),
            ("mediumblob", "is_text"),
            ("mediumint", "is_integer"),
            ("double", "is_float"),
            ("year", "is_temporal"),
        ],
    )
    def test_predicates(self, data_type, predicate):
        database = MySQL(Settings(db_type="mysql"))
        assert getattr(database, predicate)(make_column("c", data_type))

    def test_connect_uses_mysql_connector(self):
        fake_connector = MagicMock()
        fake_package = MagicMock(connector=fake_connector)
        database = MySQL(Settings(db_type="mysql", db_name="shop", password="pw"))

        with patch.dict(sys.modules, {"mysql": fake_package, "mysql.connector": fake_connector}):
            database.connect()

        fake_connector.connect.assert_called_once_with(**database.connect_kwargs())


class TestMSSQL:
    def test_defaults(self):
        database = MSSQL(Settings(db_type="mssql", db_name="crm"))
        assert database.schema == "dbo"
        kwargs = database.connect_kwargs()
        assert kwargs["port"] == 1433
        assert kwargs["user"] == "sa"
        assert kwargs["server"] == "127.0.0.1"
        assert kwargs["database"] == "crm"

    def test_list_tables_binds_schema(self):
        conn = FakeConnection((["table_name"], [("Customers",)]))
        database = MSSQL(Settings(db_type="mssql", schema="sales"), conn)

        tables = database.list_tables()

        assert [t.name for t in tables] == ["Customers"]
        assert conn.executed[0][1] == {"schema": "sales"}

    def test_list_views(self):
        conn = FakeConnection((["table_name"], [("ActiveCustomers",)]))
        database = MSSQL(Settings(db_type="mssql"), conn)

        views = database.list_views()

        assert views[0].is_view
        assert conn.executed[0][1] == {"schema": "dbo"}

    def test_list_columns(self):
        conn = FakeConnection(
            (
                COLUMN_NAMES,
                [
                    (1, "Id", "int", None, "NO", None, 10, None, None, "auto_increment", "PK_Customers", "PRIMARY KEY"),
                    (2, "Name", "nvarchar", None, "YES", 100, None, None, None, "", None, None),
                    (3, "IsActive", "bit", "((1))", "NO", None, None, None, None, "", None, None),
                ],
            )
        )
        database = MSSQL(Settings(db_type="mssql"), conn)
        table = Table("Customers")

        database.list_columns(table)

        assert conn.executed[0][1] == {"table_name": "Customers", "schema": "dbo"}
        id_column, name_column, active_column = table.columns
        assert database.is_primary_key(id_column)
        assert database.is_auto_increment(id_column)
        assert database.is_string(name_column)
        assert not database.is_auto_increment(name_column)
        assert database.is_boolean(active_column)

    def test_list_columns_max_length(self):
        conn = FakeConnection(
            (
                COLUMN_NAMES,
                [
                    (1, "Body", "nvarchar", None, "YES", -1, None, None, None, "", None, None),
                    (2, "Code", "varchar", None, "NO", 8, None, None, None, "", None, None),
                ],
            )
        )
        database = MSSQL(Settings(db_type="mssql"), conn)
        table = Table("Notes")

        database.list_columns(table)

        body, code = table.columns
        assert body.character_maximum_length is None
        assert code.character_maximum_length == 8
        assert sql_tag(database, body) == 'sql:"type:nvarchar"'
        assert sql_tag(database, code) == 'sql:"type:varchar(8);not null"'

    def test_connect_uses_pymssql(self):
        fake_driver = MagicMock()
        database = MSSQL(Settings(db_type="mssql", host="sql.internal", port=14330))

        with patch.dict(sys.modules, {"pymssql": fake_driver}):
            database.connect()

        fake_driver.connect.assert_called_once_with(
            server="sql.internal",
            port=14330,
            user="sa",
            password="",
            database="postgres",
        )
