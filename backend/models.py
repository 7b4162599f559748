"""Country record served by the API and parsing of the REST Countries payload."""

from pydantic import BaseModel, ConfigDict


class Country(BaseModel):
    """Response returned by our API."""

    model_config = ConfigDict(frozen=True)

    name: str
    capital: str = ""
    currency: str = ""  # symbol, e.g. "₹"
    population: int = 0


class CurrencyInfo(BaseModel):
    name: str = ""
    symbol: str = ""


class NameInfo(BaseModel):
    common: str
    official: str = ""


class RestCountry(BaseModel):
    """One element of the list returned by restcountries.com /v3.1/name/{name}."""

    name: NameInfo
    capital: list[str] = []
    currencies: dict[str, CurrencyInfo] = {}
    population: int = 0

    def to_country(self) -> Country:
        # Multiple capitals/currencies: take the first one listed
        capital = self.capital[0] if self.capital else ""
        currency = next(iter(self.currencies.values())).symbol if self.currencies else ""
        return Country(
            name=self.name.common,
            capital=capital,
            currency=currency,
            population=self.population,
        )
