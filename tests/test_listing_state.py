import pytest

from stayhub.core.errors import BusinessRuleError
from stayhub.models.listing import Listing
from stayhub.services.listing_state import missing_publish_steps, publish, unpublish


def _listing(s1=True, s2=True, s3=True, s4=False, status="draft") -> Listing:
    return Listing(
        host_id="h1",
        status=status,
        step1_completed=s1,
        step2_completed=s2,
        step3_completed=s3,
        step4_completed=s4,
    )


def test_publish_requires_first_three_steps_only():
    listing = publish(_listing(s4=False))
    assert listing.status == "published"


def test_publish_lists_every_missing_step():
    with pytest.raises(BusinessRuleError) as ei:
        publish(_listing(s1=False, s3=False, s4=True))
    err = ei.value
    assert err.message == (
        "Cannot publish listing. Incomplete steps: Step 1 (Property Details), Step 3 (Booking & Pricing)"
    )
    assert err.details == ["Step 1 (Property Details)", "Step 3 (Booking & Pricing)"]


def test_failed_publish_leaves_status():
    listing = _listing(s2=False)
    with pytest.raises(BusinessRuleError):
        publish(listing)
    assert listing.status == "draft"


def test_publish_and_unpublish_are_idempotent():
    listing = publish(publish(_listing()))
    assert listing.status == "published"
    listing = unpublish(unpublish(listing))
    assert listing.status == "draft"
    assert listing.step1_completed and listing.step2_completed and listing.step3_completed


def test_missing_steps_empty_when_complete():
    assert missing_publish_steps(_listing()) == []
