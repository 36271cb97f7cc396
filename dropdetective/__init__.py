"""
Drop Detective
==============

Evaluates dropshipping products for the Indian market from a Google Sheet
of product rows and video creative folders.

Pipeline:
    sheet URL -> rows -> product stubs -> batched video analysis
    -> scored products -> results store / results view

Quick Start:
    import asyncio
    from dropdetective.orchestrator import SheetAnalysisPipeline

    with SheetAnalysisPipeline() as pipeline:
        result = asyncio.run(pipeline.run(sheet_url))
        for product in result.products:
            print(product.total_score, product.product_name)
"""

__version__ = "0.1.0"
