import kitebuilder


@kitebuilder.pipeline
def pipeline(dsl):
    dsl.command("basic")
