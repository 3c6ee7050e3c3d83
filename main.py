from stmtsense.pipeline import ImportFlow, FlowState
from stmtsense.mapping_store import MappingStore
from stmtsense.models import DEFAULT_LOCALE_PACK
from stmtsense.config import get_logger, load_locale_pack

logger = get_logger(__name__)

if __name__ == "__main__":

    import argparse
    import json
    import os
    import sys

    parser = argparse.ArgumentParser(description='stmtsense - Bank Statement Structure Sniffer')
    parser.add_argument('file', nargs='?', help='Path to the bank export file (CSV, TSV, TXT)')
    parser.add_argument('--locale', help='Path to a JSON locale pack with header vocabularies')
    parser.add_argument('--save', action='store_true', help='Remember the mapping for this file shape')
    parser.add_argument('--auto-import', action='store_true', help='With --save, skip review next time')
    args = parser.parse_args()

    if args.file:
        if not os.path.exists(args.file):
            logger.error(f"File not found: {args.file}")
            sys.exit(1)
        logger.info(f"Processing input file: {args.file}")
        with open(args.file, 'rb') as f:
            input_source = f.read()
    else:
        logger.info("No input file provided. Using built-in Mock Data.")
        # Brazilian export: banner lines, semicolons, comma decimals, debit/credit columns
        input_source = (
            "Extrato de Conta Corrente;Data: 31/10/2023\n"
            "Agencia: 1234 Conta: 56789-0\n"
            "\n"
            "Data Mov;Descrição;Débito;Crédito;Saldo\n"
            "01/10/2023;Supermercado;50,20;;1.000,00\n"
            "02/10/2023;Salario;;3.500,00;4.500,00\n"
            "15/10/2023;Padaria;4,50;;4.495,50\n"
        )

    locale = load_locale_pack(args.locale) if args.locale else DEFAULT_LOCALE_PACK
    store = MappingStore()
    flow = ImportFlow(store=store, locale=locale)

    # Stage 1-4: Analysis
    analysis = flow.analyze(input_source)
    print("\n--- File Analysis ---")
    print(json.dumps(analysis.to_wire(), indent=2, ensure_ascii=False))

    print("\n--- Sample Preview ---")
    print(analysis.sample_frame().head())

    # Stage 5: Review
    state = flow.begin_review()
    if state == FlowState.USER_CONFIRM_DIALECT:
        dialect = analysis.probed_dialect
        print(f"\n[!] Low dialect confidence ({dialect.confidence:.2f}).")
        try:
            answer = input(f"Is this a European format file (comma decimals)? [{'Y/n' if dialect.is_european_format else 'y/N'}]: ").strip().lower()
        except EOFError:
            answer = ""
        is_european = dialect.is_european_format if not answer else answer.startswith('y')
        flow.confirm_dialect(is_european)

    if flow.state == FlowState.MAPPING_REVIEW:
        flow.validate()

    print("\n--- Proposed Mapping ---")
    print(flow.mapping.model_dump_json(indent=2))

    if flow.state == FlowState.INVALID:
        print("\n[!] Mapping needs manual review:")
        for error in flow.validation.errors:
            print(f"  - {error}")
        sys.exit(2)

    request = flow.submit(remember=args.save, auto_import=args.auto_import)
    print("\n--- Import Request ---")
    print(request.model_dump_json(by_alias=True, indent=2))

    print("\nProcess Complete.")
