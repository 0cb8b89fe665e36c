"""
Engine Configuration

Shared defaults for the tapes, the forward-mode helpers and the bumping
checks. A single module-level instance, `config`, is read at call time so a
test or an application can adjust it in place.
"""

from dataclasses import dataclass


@dataclass
class AutoDiffConfig:
    """Shared configuration for the AD engine"""

    # Check that every Variable used in an operation belongs to the tape and
    # generation it is being recorded on. Costs one identity comparison per
    # operand; switch off in tight loops once the calling code is trusted.
    validate_variables: bool = True

    # Default number of nodes written by Tape.log_nodes
    log_node_limit: int = 100

    # Central-difference step used by ad.bumping
    fd_step: float = 1e-5

    # An edge-pushing weight is dropped when a sum cancels to within this
    # fraction of its larger summand
    zero_tolerance: float = 1e-15


config = AutoDiffConfig()
