#!/usr/bin/env python3
"""
Demo: Generate Uniswap v4 hook contracts from example option sets.

Prints each contract with its analysis report and saves it as a .sol file.
"""

import logging

from hookgen import analyze_contract, build_contract, is_access_control_required
from hookgen.backends import generate_solidity, save_solidity_file
from hookgen.examples import build_example_options


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("HOOK GENERATOR DEMO")
    print("=" * 80)

    for example, options in build_example_options().items():
        model = build_contract(options)
        report = analyze_contract(model)

        print(f"\n{example.upper()}:")
        print("-" * 80)
        print(generate_solidity(model))

        print(f"Parents:          {', '.join(model.parents)}")
        print(f"Permission flags: {report.address_mask}")
        print(f"Lifecycle hooks:  {', '.join(report.lifecycle_hooks) or '(none)'}")
        print(f"Access required:  {is_access_control_required(options)}")
        for warning in report.warnings:
            print(f"  ! {warning}")

        filename = f"{model.name}.sol"
        save_solidity_file(model, filename)
        print(f"\nSaved to: {filename}")

    print("\n" + "=" * 80)
    print("The low 14 bits of the deployed hook address must equal the permission flags.")
    print("=" * 80)


if __name__ == "__main__":
    main()
