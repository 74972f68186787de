#!/usr/bin/env python3
"""
Issue a signed S3 upload policy from local settings.

Handy for checking bucket CORS and policy settings by hand: paste the
printed params into an upload form, or feed them to curl.

Usage:
    python scripts/sign_policy.py
    python scripts/sign_policy.py --bucket my-uploads --region eu-west-1 --key-start avatars/

Requires:
    - .env file (or environment) with S3_BUCKET, S3_ACCESS_KEY, S3_SECRET_KEY
"""

import json
import logging
import sys
from pathlib import Path

# Add the project root to path so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from s3_post_policy.config import get_settings
from s3_post_policy.core.policy import PolicyDocument, PolicySigner, PolicySigningError

logger = logging.getLogger("sign_policy")


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Print a signed S3 POST policy')
    parser.add_argument('--bucket', help='Override S3_BUCKET')
    parser.add_argument('--region', help='Override S3_REGION')
    parser.add_argument('--key-start', help='Override S3_KEY_START')
    parser.add_argument('--acl', help='Override S3_ACL')
    parser.add_argument('--show-policy', action='store_true', help='Also print the decoded policy document')
    args = parser.parse_args()

    settings = get_settings()
    overrides = {
        's3_bucket': args.bucket,
        's3_region': args.region,
        's3_key_start': args.key_start,
        's3_acl': args.acl,
    }
    settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    missing = settings.validate_required_fields()
    if missing:
        print(f"ERROR: Missing settings: {', '.join(missing)}")
        sys.exit(1)

    try:
        result = PolicySigner().sign(settings.to_signing_request())
    except PolicySigningError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    logger.info(
        "Issued policy",
        extra={"bucket": result.bucket, "expires_at": result.expires_at.isoformat()}
    )

    print(json.dumps(result.to_dict(), indent=2))
    print(f"\nUpload URL: {result.upload_url}")

    if args.show_policy:
        document = PolicyDocument.decode(result.params.policy)
        print("\nPolicy document:")
        print(json.dumps(document.to_json(), indent=2))


if __name__ == '__main__':
    main()
