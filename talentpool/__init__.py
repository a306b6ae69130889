"""TalentPool - aggregated job search over internal positions and USAJobs."""

__version__ = "0.1.0"
