#!/usr/bin/env python3
"""
Adicionar um registro direto no arquivo JSON de uma colecao (sem passar pela API).

Uso:
  python scripts/add_record.py projects title="Acme" link=https://acme.test image=acme.png client=Acme description="Site"
  python scripts/add_record.py gallery image=img/1.png title="Primeiro" [--data-dir ./data]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from portfolio_api.core.config import get_settings
from portfolio_api.domain.records import SCHEMAS, ValidationError
from portfolio_api.repositories.collection_store import FileCollectionStore


def parse_fields(pairs: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise SystemExit(f"Campo invalido '{pair}' (use chave=valor)")
        fields[key.strip()] = value
    return fields


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Append a record to a collection file")
    ap.add_argument("collection", choices=sorted(SCHEMAS), help="Target collection")
    ap.add_argument("fields", nargs="*", help="key=value pairs")
    ap.add_argument("--data-dir", help="Directory holding the JSON files (default: DATA_DIR)")
    args = ap.parse_args(argv)

    schema = SCHEMAS[args.collection]
    data_dir = Path(args.data_dir) if args.data_dir else get_settings().data_dir
    store = FileCollectionStore(schema, data_dir / f"{schema.name}.json")
    try:
        record = store.append(parse_fields(args.fields))
    except ValidationError as exc:
        raise SystemExit(f"Campos obrigatorios ausentes: {', '.join(exc.fields)}")
    print(f"OK: {schema.saved_message}")
    for key, value in record.items():
        print(f"  {key}: {value}")
    print(f"  total: {len(store)}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
