from cardrecon.config.settings import Settings
from cardrecon.validation.base import BaseCardValidator
from cardrecon.validation.issuer import IssuerValidator
from cardrecon.validation.luhn import LuhnValidator


class ValidatorFactory:
    """Creates the card validator selected by settings."""

    VALIDATORS: dict[str, type[BaseCardValidator]] = {
        "luhn": LuhnValidator,
        "issuer": IssuerValidator,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseCardValidator:
        mode = settings.validation_mode.lower()
        validator_cls = cls.VALIDATORS.get(mode)
        if validator_cls is None:
            raise ValueError(
                f"Unknown validation mode '{mode}'. Choose from: {list(cls.VALIDATORS)}"
            )
        return validator_cls()
