# prompts.py
# cut configuration: interactive console questions or parsed arguments
from __future__ import annotations
import math
from typing import Callable, List, Sequence

from .composer import CutConfig

InputFn = Callable[[str], str]


def ask_apply_cut(input_fn: InputFn = input) -> bool:
    prompt = "Would you like to apply a minimum cluster energy cut? (yes/no): "
    while True:
        response = input_fn(prompt).strip().lower()
        if response == "yes":
            return True
        if response == "no":
            return False
        prompt = "Invalid response. Please answer 'yes' or 'no': "


def ask_cut_value(input_fn: InputFn = input) -> float:
    while True:
        raw = input_fn("Enter the energy cut value (in GeV, numeric values only): ")
        try:
            value = float(raw)
        except ValueError:
            value = math.nan
        if math.isfinite(value):
            return value
        print("Invalid input. Please enter a numeric value for the energy cut.")


def ask_histograms_to_cut(options: Sequence[str], input_fn: InputFn = input) -> List[str]:
    """
    Menu selection by 1-based index, e.g. '1 3 4'.

    Invalid tokens are reported and dropped; asks again until at least one
    valid index is given.
    """
    print("Which histograms would you like to apply the energy cut to? "
          "(Separate choices by spaces, e.g., '1 3 4')")
    for i, name in enumerate(options, start=1):
        print(f"{i}. {name}")

    while True:
        chosen: List[str] = []
        for tok in input_fn("> ").split():
            try:
                choice = int(tok)
            except ValueError:
                choice = 0
            if 1 <= choice <= len(options):
                name = options[choice - 1]
                if name not in chosen:
                    chosen.append(name)
            else:
                print(f"Invalid choice: {tok}. Please select numbers between 1 and {len(options)}.")
        if chosen:
            return chosen
        print("No valid histogram selected, please try again.")


def interactive_cut_config(options: Sequence[str], input_fn: InputFn = input) -> CutConfig:
    if not ask_apply_cut(input_fn):
        return CutConfig()
    hists = ask_histograms_to_cut(options, input_fn)
    value = ask_cut_value(input_fn)
    return CutConfig(enabled=True, value=value, histograms=tuple(hists))


def cut_config_from_args(args) -> CutConfig:
    """CutConfig from --cut / --cut-hists; disabled when --cut was not given."""
    if args.cut is None:
        return CutConfig()
    return CutConfig(enabled=True, value=float(args.cut), histograms=tuple(args.cut_hists or ()))
