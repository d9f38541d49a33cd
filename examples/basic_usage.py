"""Basic usage example for the similar records service."""

import asyncio

from similar_records import IssueFeatures, SimilarityService
from similar_records.core.exceptions import SimilarRecordsError

from sample_data.generate_sample_data import generate_issues, reword


async def basic_lookup_demo():
    """Demonstrate storing issue reports and finding similar ones."""
    print("🔍 Similar Records - Basic Usage Demo")
    print("=" * 50)

    # Generate sample issues
    print("\n1. Generating sample issue reports...")
    records = generate_issues(count=200)
    print(f"   Generated {len(records)} issue reports")

    print("\n2. Initializing similarity service...")
    async with SimilarityService.create(
        records=records,
        default_top_n=3,
        timeout=5.0,
        log_level="INFO"
    ) as service:

        stats = await service.get_stats()
        print(f"   Store contains {stats['service']['total_records']} records")
        print(f"   Ranking with {stats['engine']['max_workers']} workers")

        print("\n3. Looking up reworded copies of stored issues...")
        for stored in records[:3]:
            query = reword(stored.record)
            print(f"\n   Query: '{query.operation}' / '{query.actual_behavior}'")

            results = await service.find_similar(query)
            if results:
                for i, result in enumerate(results, 1):
                    marker = " (original)" if result.record_id == stored.record_id else ""
                    print(f"     {i}. {result.record_id} - Score: {result.score:.3f}{marker}")
            else:
                print("   No similar records found")

        print("\n4. Lookups with camelCase mappings...")
        results = await service.find_similar({
            "operation": "Turn on the smart plug",
            "expectedBehavior": "The smart plug turns on",
            "actualBehavior": "Nothing happens"
        }, top_n=5)
        print(f"   Found {len(results)} similar records")

        print("\n5. Managing stored records...")
        service.set_record("ISSUE-NEW", IssueFeatures(
            operation="Turn on the smart plug",
            expected_behavior="The smart plug is turned on",
            actual_behavior="Nothing happens"
        ))
        results = await service.find_similar({
            "operation": "Turn on the smart plug",
            "expectedBehavior": "The smart plug is turned on",
            "actualBehavior": "Nothing happens"
        })
        print(f"   Best match after insert: {results[0].record_id} ({results[0].score:.3f})")
        service.remove_record("ISSUE-NEW")

        print("\n6. Invalid queries...")
        try:
            await service.find_similar({})
        except SimilarRecordsError as e:
            print(f"   Rejected empty query: {e}")

        print("\n7. Health check...")
        health = await service.health_check()
        print(f"   System status: {health['status']}")

        final_stats = await service.get_stats()
        print(f"   Total rankings performed: {final_stats['engine']['total_rankings']}")
        print(f"   Average ranking time: {final_stats['engine']['avg_process_time_ms']:.3f}ms")

    print("\n✅ Demo completed successfully!")


if __name__ == "__main__":
    asyncio.run(basic_lookup_demo())
