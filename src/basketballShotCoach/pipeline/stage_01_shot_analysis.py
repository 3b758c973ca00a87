from basketballShotCoach.config.configuration import ConfigurationManager
from basketballShotCoach.components.shot_analysis import ShotAnalysisSession
from basketballShotCoach.components.shot_batch import ShotBatchAnalysis
from basketballShotCoach import logger

STAGE_NAME = "Shot analysis stage"


class ShotAnalysisPipeline:
    def __init__(self):
        pass

    def main(self):
        config = ConfigurationManager()
        shot_analysis_config = config.get_shot_analysis_config()
        detection_config = config.get_detection_config()
        session = ShotAnalysisSession.from_config(config)
        shot_batch = ShotBatchAnalysis(shot_analysis_config, detection_config, session)
        return shot_batch.run_all()


if __name__ == '__main__':
    try:
        logger.info(f">>>>>>>> stage {STAGE_NAME} start <<<<<<<<")
        obj = ShotAnalysisPipeline()
        obj.main()
        logger.info(f">>>>>>>> stage {STAGE_NAME} completed <<<<<<<<\n\nx===============")
    except Exception as e:
        logger.exception(e)
        raise e
