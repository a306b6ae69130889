"""USAJobs code list models.

Every code list endpoint answers with the same envelope::

    {"CodeList": [{"ValidValue": [...], "id": "..."}], "DateGenerated": "..."}
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BeforeValidator, ConfigDict, Field

from talentpool.models.base import CamelModel, one_or_many
from talentpool.models.usajobs import Text


class CodeListItem(CamelModel):
    """Base structure for all code list items.

    List-specific fields the provider adds are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    code: Text = None
    value: Text = None
    last_modified: datetime | None = None
    is_disabled: Text = None

    @property
    def is_active(self) -> bool:
        return (self.is_disabled or "").lower() != "yes"


class OccupationalSeriesItem(CodeListItem):
    job_family: Text = None


ItemT = TypeVar("ItemT", bound=CodeListItem)


class CodeListGroup(CamelModel, Generic[ItemT]):
    valid_value: Annotated[list[ItemT], BeforeValidator(one_or_many)] = Field(default_factory=list)
    id: str | None = None


class CodeListResponse(CamelModel, Generic[ItemT]):
    code_list: Annotated[list[CodeListGroup[ItemT]], BeforeValidator(one_or_many)] = Field(
        default_factory=list
    )
    date_generated: datetime | None = None

    def flatten(self) -> list[ItemT]:
        """All groups' items in one list, in payload order."""
        return [item for group in self.code_list for item in group.valid_value]


class CodeList(str, Enum):
    """Known code list endpoints, valued by their path segment."""

    OCCUPATIONAL_SERIES = "occupationalseries"
    PAY_PLANS = "payplans"
    HIRING_PATHS = "hiringpaths"
    POSITION_SCHEDULE_TYPES = "positionscheduletypes"
    WORK_SCHEDULES = "workschedules"
    SECURITY_CLEARANCES = "securityclearances"
    COUNTRIES = "countries"
    POSTAL_CODES = "postalcodes"
    GEO_LOCATIONS = "geoloc"
    TRAVEL_REQUIREMENTS = "travelrequirements"
    REMOTE_WORK = "remotework"
    AGENCY_SUBELEMENTS = "agencysubelements"
    GSA_GEO_LOCATION_CODES = "gsageolocationcodes"
    COUNTRY_SUBDIVISIONS = "countrysubdivisions"
    TRAVEL_PERCENTAGES = "travelpercentages"
    POSITION_OFFERING_TYPES = "positionofferingtypes"
    WHO_MAY_APPLY = "whomayapply"
    ACADEMIC_HONORS = "academichonors"
    ACTION_CODES = "actioncodes"
    DEGREE_TYPE_CODES = "degreetypecodes"
    DOCUMENT_FORMATS = "documentformats"
    RACE_CODES = "racecodes"
    ETHNICITIES = "ethnicities"
    DOCUMENTATIONS = "documentations"
    FEDERAL_EMPLOYMENT_STATUSES = "federalemploymentstatuses"
    LANGUAGE_PROFICIENCIES = "languageproficiencies"
    LANGUAGE_CODES = "languagecodes"
    MILITARY_STATUS_CODES = "militarystatuscodes"
    REFEREE_TYPE_CODES = "refereetypecodes"
    SPECIAL_HIRINGS = "specialhirings"
    REMUNERATION_RATE_INTERVAL_CODES = "remunerationrateintervalcodes"
    APPLICATION_STATUSES = "applicationstatuses"
    ACADEMIC_LEVELS = "academiclevels"
    KEY_STANDARD_REQUIREMENTS = "keystandardrequirements"
    REQUIRED_STANDARD_DOCUMENTS = "requiredstandarddocuments"
    DISABILITIES = "disabilities"
    APPLICANT_SUPPLIERS = "applicantsuppliers"
    MISSION_CRITICAL_CODES = "missioncriticalcodes"
    ANNOUNCEMENT_CLOSING_TYPES = "announcementclosingtypes"
    SERVICE_TYPES = "servicetypes"
    LOCATION_EXPANSIONS = "locationexpansions"

    @property
    def endpoint(self) -> str:
        return f"/codelist/{self.value}"

    @property
    def cache_key(self) -> str:
        return f"usajobs_codelist_{self.value}"

    @property
    def item_type(self) -> type[CodeListItem]:
        if self is CodeList.OCCUPATIONAL_SERIES:
            return OccupationalSeriesItem
        return CodeListItem


HOT_CODE_LISTS = (
    CodeList.OCCUPATIONAL_SERIES,
    CodeList.PAY_PLANS,
    CodeList.HIRING_PATHS,
    CodeList.POSITION_SCHEDULE_TYPES,
)
