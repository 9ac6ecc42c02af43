import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from config.settings import get_settings
from db.connection import open_catalog
from db.repos.lists_repo import ListsRepo
from db.repos.tenants_repo import TenantsRepo
from models.update_payload import UpdateCompanyPayload
from pipelines.runner import Pipeline, RunContext
from pipelines.steps.persist_companies import PersistCompanies
from pipelines.steps.validate_companies import ValidateCompanies
from services.auth import SettingsSessionProvider
from services.companies_service import build_companies_service
from services.errors import CompaniesError
from utils.company_size import parse_size_range
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)


def _service(args, conn):
	return build_companies_service(conn, SettingsSessionProvider(args.user))


def _print_json(data: Any) -> None:
	print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_bootstrap(args):
	with open_catalog(args.db):
		pass
	print("Schema ready")


def cmd_add_tenant(args):
	with open_catalog(args.db) as conn:
		repo = TenantsRepo(conn)
		customer_id = repo.create_customer(args.name, customer_id=args.customer_id)
		for user_id in args.member or []:
			repo.add_member(user_id, customer_id)
	print(customer_id)


def cmd_import(args):
	data = json.loads(Path(args.input).read_text(encoding="utf-8"))
	companies = data.get("companies") if isinstance(data, dict) else data
	with open_catalog(args.db) as conn:
		# Overlay rows reference the tenant; create it on first import
		TenantsRepo(conn).create_customer(args.tenant_name or args.tenant, customer_id=args.tenant)
		ctx = RunContext(tenant_id=args.tenant)
		ctx.companies = list(companies or [])
		if args.list_name:
			ctx.list_id = ListsRepo(conn).create_list(args.tenant, args.list_name)
		pipeline = Pipeline([
			ValidateCompanies(),
			PersistCompanies(conn),
		])
		ctx = pipeline.run(ctx)
	count = int(ctx.meta.get("processed_companies") or 0)
	print(f"Imported {count} companies")
	if ctx.list_id:
		print(f"List: {ctx.list_id}")


def cmd_list(args):
	params: Dict[str, Any] = {
		"search": args.search,
		"country": args.country,
		"region": args.region,
		"category": args.category,
		"technology": args.technology,
		"min_employees": args.min_employees,
		"max_employees": args.max_employees,
		"employees": args.size,
		"listId": args.list_id,
		"sortBy": args.sort_by,
		"sortOrder": args.sort_order,
		"page": args.page,
		"limit": args.limit,
	}
	with open_catalog(args.db) as conn:
		result = _service(args, conn).get_companies(params)
	_print_json(result.model_dump(exclude_none=True))


def cmd_show(args):
	with open_catalog(args.db) as conn:
		item = _service(args, conn).get_company_by_id(args.company_id)
	_print_json(item.model_dump(exclude_none=True))


def cmd_lists(args):
	with open_catalog(args.db) as conn:
		lists = _service(args, conn).get_company_lists(args.company_id)
	_print_json([lst.model_dump(exclude_none=True) for lst in lists])


def cmd_metadata(args):
	with open_catalog(args.db) as conn:
		payload = _service(args, conn).get_company_metadata(args.company_id)
	_print_json(payload)


def _parse_assignment(text: str):
	key, sep, raw = text.partition("=")
	if not sep or not key.strip():
		raise argparse.ArgumentTypeError(f"Expected key=value, got: {text}")
	try:
		value = json.loads(raw)
	except ValueError:
		value = raw
	return key.strip(), value


def cmd_update(args):
	payload = UpdateCompanyPayload(**dict(args.set))
	with open_catalog(args.db) as conn:
		item = _service(args, conn).update_company(args.company_id, payload)
	_print_json(item.model_dump(exclude_none=True))


def cmd_parse_size(args):
	size = parse_size_range(args.text)
	_print_json({"min": size.min, "max": size.max})


def main():
	settings = get_settings()
	init_logging(settings.log_level)
	parser = argparse.ArgumentParser(description="Company catalog CLI")
	parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
	parser.add_argument("--user", default=None, help="Acting user id (default: CURRENT_USER_ID)")
	sub = parser.add_subparsers(dest="cmd", required=True)

	p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
	p_boot.set_defaults(func=cmd_bootstrap)

	p_ten = sub.add_parser("add-tenant", help="Create a tenant (customer) and attach members")
	p_ten.add_argument("--name", required=True)
	p_ten.add_argument("--customer-id", default=None, help="Explicit tenant id (default: new UUID)")
	p_ten.add_argument("--member", action="append", help="User id to attach (repeatable)")
	p_ten.set_defaults(func=cmd_add_tenant)

	p_imp = sub.add_parser("import", help="Import companies JSON into a tenant's catalog")
	p_imp.add_argument("--input", required=True, help="Path to JSON file (array or {companies: [...]})")
	p_imp.add_argument("--tenant", required=True, help="Tenant (customer) id")
	p_imp.add_argument("--tenant-name", default=None, help="Name used if the tenant does not exist yet")
	p_imp.add_argument("--list-name", default=None, help="Also create a static list with the imported companies")
	p_imp.set_defaults(func=cmd_import)

	p_ls = sub.add_parser("list", help="List companies with filters, sorting and pagination")
	p_ls.add_argument("--search", "-q", default=None)
	p_ls.add_argument("--country", action="append", help="Country filter (repeatable)")
	p_ls.add_argument("--region", action="append", help="Region filter (repeatable)")
	p_ls.add_argument("--category", action="append", help="Category filter, any of (repeatable)")
	p_ls.add_argument("--technology", action="append", help="Technology filter, any of (repeatable)")
	p_ls.add_argument("--min-employees", type=int, default=None)
	p_ls.add_argument("--max-employees", type=int, default=None)
	p_ls.add_argument("--size", action="append", help="Company size bucket, e.g. '11-50 employees' (repeatable)")
	p_ls.add_argument("--list-id", default=None, help="Only companies in this list")
	p_ls.add_argument("--sort-by", default=None, help="Sort column (default: created_at)")
	p_ls.add_argument("--sort-order", choices=["asc", "desc"], default=None)
	p_ls.add_argument("--page", type=int, default=None)
	p_ls.add_argument("--limit", type=int, default=None)
	p_ls.set_defaults(func=cmd_list)

	p_show = sub.add_parser("show", help="Show one company with scoring and lists")
	p_show.add_argument("--company-id", required=True)
	p_show.set_defaults(func=cmd_show)

	p_lists = sub.add_parser("lists", help="Lists that contain a company")
	p_lists.add_argument("--company-id", required=True)
	p_lists.set_defaults(func=cmd_lists)

	p_meta = sub.add_parser("metadata", help="Latest provider JSON stored for a company")
	p_meta.add_argument("--company-id", required=True)
	p_meta.set_defaults(func=cmd_metadata)

	p_upd = sub.add_parser("update", help="Update company fields")
	p_upd.add_argument("--company-id", required=True)
	p_upd.add_argument("--set", action="append", type=_parse_assignment, required=True, help="field=value (JSON values allowed, repeatable)")
	p_upd.set_defaults(func=cmd_update)

	p_size = sub.add_parser("parse-size", help="Parse a company size bucket string")
	p_size.add_argument("text")
	p_size.set_defaults(func=cmd_parse_size)

	args = parser.parse_args()
	try:
		args.func(args)
	except (CompaniesError, ValidationError) as e:
		logger.debug("Command failed", exc_info=True)
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
