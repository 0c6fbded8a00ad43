#!/usr/bin/env python3
"""
Fetch patients from the assessment API, classify risk, and submit the results.

Usage:
    python assessment.py [--dry-run] [--limit N] [--max-retries N] [--json]

Set `ASSESSMENT_API_KEY` (and optionally `ASSESSMENT_BASE_URL`) in the
environment, or pass `--api-key` / `--base-url`.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from patient_client import FetchError, PatientClient
from risk_aggregator import AssessmentResult, assess_patients

BASE_URL = os.environ.get("ASSESSMENT_BASE_URL", "https://assessment.ksensetech.com")
DEFAULT_API_KEY = os.environ.get("ASSESSMENT_API_KEY", "")

logger = logging.getLogger("assessment")


def report(results: AssessmentResult) -> None:
    logger.info("High Risk Patients (%d): %s", len(results.high_risk), list(results.high_risk))
    logger.info("Fever Patients (%d): %s", len(results.fever), list(results.fever))
    logger.info(
        "Data Quality Issues (%d): %s",
        len(results.data_quality_issue),
        list(results.data_quality_issue),
    )
    logger.info("Total Patients Processed: %d", results.total_patients)


def main(argv: Optional[List[str]] = None, client: Optional[PatientClient] = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--dry-run", action="store_true", help="Classify only, do not POST results")
    parser.add_argument("--limit", type=int, default=20, help="Page size for GET /patients")
    parser.add_argument("--max-retries", type=int, default=5, help="Attempts per page before giving up")
    parser.add_argument("--api-key", default=DEFAULT_API_KEY, help="API key override")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL override")
    parser.add_argument("--json", action="store_true", help="Print the submission payload as JSON")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="%(levelname)s: %(message)s")

    if client is None:
        if not args.api_key:
            logger.error("No API key: set ASSESSMENT_API_KEY or pass --api-key")
            return 2
        client = PatientClient(args.base_url, args.api_key)

    try:
        patients = client.fetch_all(limit=args.limit, max_retries=args.max_retries)
    except FetchError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("Fetched %d patient records", len(patients))

    results = assess_patients(patients)
    report(results)

    payload = results.to_payload()
    if args.json:
        print(json.dumps(payload, indent=2))

    if args.dry_run:
        return 0

    logger.info("Submitting results to %s", client.base_url)
    resp = client.submit_assessment(payload)
    if resp is None:
        return 1
    logger.info("Assessment response: %s", json.dumps(resp))
    return 0


if __name__ == "__main__":
    sys.exit(main())
