"""
credproof: Basic Usage Example

Demonstrates:
- Issuing a proof from extractor output
- Verifying it with consent
- Recovering after the store is lost (decode fallback)
- Tightening the policy without code changes
"""

from pathlib import Path

from credproof import Policy, ProofService, ProofStore
from credproof.claims import ExtractedData


def main():
    """Basic credproof usage."""

    print("=" * 60)
    print("credproof: Basic Usage Example")
    print("=" * 60)
    print()

    # 1️⃣ Issue a proof
    print("1️⃣ Issuing proof from a credit report...")
    service = ProofService(ProofStore())
    issued = service.issue_from_extraction(
        ExtractedData(credit_score=742, document_type="credit_report", issuer="Experian"),
        wallet_address="0x71C7656EC7ab88b098defB751B7401B5f6d8976F",
        file_name="credit_report_march.pdf",
    )
    print(f"  CID: {issued.reference[:48]}...")
    print()

    # 2️⃣ Verify with consent
    print("2️⃣ Verifying with consent...")
    report = service.verify(issued.reference, consent=True)
    print(f"  {'✅' if report.is_valid else '❌'} {report.result.reason}")
    print()

    # 3️⃣ Store lost, reference still resolves
    print("3️⃣ Simulating restart (empty store)...")
    restarted = ProofService(ProofStore())
    report = restarted.verify(issued.reference, consent=True)
    print(f"  {'✅' if report.is_valid else '❌'} decoded from reference: {report.result.reason}")
    print()

    # 4️⃣ Stricter policy from YAML
    print("4️⃣ Applying strict policy...")
    strict = Policy.from_yaml(Path(__file__).parent / "strict_policy.yaml")
    report = restarted.verify(issued.reference, consent=True, policy=strict)
    print(f"  {'✅' if report.is_valid else '❌'} {report.result.reason}")
    print()

    print("=" * 60)
    print("Next steps:")
    print(f"  credproof verify {issued.reference[:24]}... --consent")
    print("  credproof policy --policy examples/strict_policy.yaml")


if __name__ == "__main__":
    main()
