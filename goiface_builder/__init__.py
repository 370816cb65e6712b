from .contract import merge_contracts, render_contract, synthesize_contract
from .generate import GenerateResult, generate_contract

__all__ = [
    "__version__",
    "GenerateResult",
    "generate_contract",
    "merge_contracts",
    "render_contract",
    "synthesize_contract",
]

__version__ = "0.1.0"
